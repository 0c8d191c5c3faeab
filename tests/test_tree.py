from __future__ import annotations

import copy

from uiagent.plan.tree import (
    IdAllocator,
    collect_ids,
    ensure_unique_ids,
    find_first_node_by_type,
    find_node_with_parent,
    used_components,
)


def test_collect_ids_walks_whole_tree(button_plan):
    ids = collect_ids(button_plan["tree"])

    assert ids == {"root", "node-2", "text-1", "node-8", "node-7", "text-3", "node-9", "text-4"}


def test_allocator_counter_is_seeded_from_existing_ids():
    allocator = IdAllocator({"root", "a", "b"})
    subtree = {
        "id": "a",
        "type": "Card",
        "children": [
            {"type": "text", "text": "missing id"},
            {"id": "fresh", "type": "Button"},
        ],
    }

    allocator.assign(subtree)

    assert subtree["id"] == "node-5"
    assert subtree["children"][0]["id"] == "text-6"
    assert subtree["children"][1]["id"] == "fresh"


def test_allocator_skips_taken_candidates():
    allocator = IdAllocator({"root", "node-4"})
    node = {"id": "root", "type": "div"}

    allocator.assign(node)

    assert node["id"] == "node-5"


def test_collisions_are_renumbered_in_pre_order():
    allocator = IdAllocator({"x"})
    subtree = {"id": "x", "type": "div", "children": [{"id": "x", "type": "Card"}, {"id": "x", "type": "Chart"}]}

    allocator.assign(subtree)

    assert [subtree["id"]] + [child["id"] for child in subtree["children"]] == ["node-3", "node-4", "node-5"]


def test_ensure_unique_ids_leaves_unique_tree_untouched(button_plan):
    tree = copy.deepcopy(button_plan["tree"])

    ensure_unique_ids(tree)

    assert tree == button_plan["tree"]


def test_ensure_unique_ids_fixes_duplicates_without_colliding_later_ids():
    tree = {
        "id": "root",
        "type": "div",
        "children": [
            {"id": "dup", "type": "Card"},
            {"id": "dup", "type": "Card"},
            {"id": "node-5", "type": "Chart"},
        ],
    }

    ensure_unique_ids(tree)

    ids = [tree["id"]] + [child["id"] for child in tree["children"]]
    assert len(set(ids)) == len(ids)
    assert ids == ["root", "dup", "node-6", "node-5"]


def test_find_node_with_parent(button_plan):
    node, parent = find_node_with_parent(button_plan["tree"], "node-9")

    assert node["type"] == "Button"
    assert parent["id"] == "node-7"
    assert find_node_with_parent(button_plan["tree"], "root") == (button_plan["tree"], None)
    assert find_node_with_parent(button_plan["tree"], "missing") is None


def test_find_first_node_by_type_and_used_components(button_plan):
    assert find_first_node_by_type(button_plan["tree"], "Card")["id"] == "node-7"
    assert used_components(button_plan["tree"]) == ["Button", "Card"]
