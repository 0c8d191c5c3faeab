from __future__ import annotations

import json

import pytest

from uiagent.agent.fallback import (
    build_fallback_change_plan,
    build_fallback_explanation,
    build_fallback_plan,
    pick_add_parent_id,
    pick_components,
)
from uiagent.plan.apply import apply_change_plan
from uiagent.plan.tree import collect_ids, find_first_node_by_type, iter_nodes


@pytest.mark.parametrize(
    ("intent", "expected"),
    [
        ("add a navbar and a table", ["Table", "Navbar"]),
        ("NAVIGATION with a Graph", ["Navbar", "Chart"]),
        ("a login form with a CTA", ["Button", "Input"]),
        ("something else entirely", ["Button", "Card", "Navbar"]),
        (None, ["Button", "Card", "Navbar"]),
    ],
)
def test_pick_components(intent, expected):
    assert pick_components(intent) == expected


def test_navbar_and_table_plan():
    plan = build_fallback_plan("add a navbar and a table")

    assert plan.kind == "plan"
    assert plan.components == ["Table", "Navbar"]
    header = plan.tree["children"][0]
    assert header["type"] == "section"
    assert header["children"][0]["type"] == "Navbar"
    assert header["children"][0]["props"]["title"] == "Project Atlas"


def test_default_plan_nests_single_button_in_card():
    plan = build_fallback_plan("a dashboard")

    buttons = [node for node in iter_nodes(plan.tree) if node.get("type") == "Button"]
    assert len(buttons) == 1
    card = find_first_node_by_type(plan.tree, "Card")
    assert buttons[0] in card["children"]


def test_plan_without_navbar_uses_heading_text_and_sidebar_row():
    plan = build_fallback_plan("sidebar only")

    header = plan.tree["children"][0]
    assert header["children"][0] == {"id": "text-1", "type": "text", "text": "Workspace Overview"}
    body_row = plan.tree["children"][1]["children"][0]
    assert [child["type"] for child in body_row["children"]] == ["Sidebar", "section"]
    content = body_row["children"][1]
    assert content["children"][0]["text"] == "No UI components requested."


def test_plan_ids_are_unique_and_output_is_stable():
    first = build_fallback_plan("card table modal input navbar sidebar chart button")
    second = build_fallback_plan("card table modal input navbar sidebar chart button")

    ids = [node["id"] for node in iter_nodes(first.tree)]
    assert len(ids) == len(set(ids))
    assert json.dumps(first.to_wire()) == json.dumps(second.to_wire())


def test_remove_the_button(button_plan):
    change = build_fallback_change_plan("remove the button", button_plan)

    assert change.summary == "Removed Button."
    assert [op.model_dump(by_alias=True, exclude_none=True) for op in change.operations] == [
        {"op": "remove", "targetId": "node-9"}
    ]
    applied = apply_change_plan(button_plan, change)
    assert applied.ok
    assert "node-9" not in collect_ids(applied.plan["tree"])


def test_remove_wins_over_update_and_add(button_plan):
    change = build_fallback_change_plan("remove or update or add the card", button_plan)

    assert change.operations[0].op == "remove"
    assert change.operations[0].target_id == "node-7"


def test_update_button_replaces_label(button_plan):
    change = build_fallback_change_plan("rename the button", button_plan)

    assert change.summary == "Updated Button."
    applied = apply_change_plan(button_plan, change)
    assert applied.ok
    button = find_first_node_by_type(applied.plan["tree"], "Button")
    assert button["children"] == [{"id": "text-900", "type": "text", "text": "Updated Action"}]


def test_update_card_merges_title(button_plan):
    change = build_fallback_change_plan("change the card", button_plan)

    applied = apply_change_plan(button_plan, change)
    card = find_first_node_by_type(applied.plan["tree"], "Card")
    assert card["props"] == {"title": "Updated Summary"}


def test_add_goes_to_second_top_level_child(button_plan):
    change = build_fallback_change_plan("add a chart", button_plan)

    op = change.operations[0]
    assert change.summary == "Added Chart."
    assert op.parent_id == "node-8"
    assert op.position == "end"

    applied = apply_change_plan(button_plan, change)
    chart = applied.plan["tree"]["children"][1]["children"][-1]
    assert chart["type"] == "Chart"
    assert chart["id"] == "node-1"
    assert applied.plan["components"] == ["Button", "Card", "Chart"]


def test_update_without_target_falls_back_to_add(button_plan):
    change = build_fallback_change_plan("update the table", button_plan)

    assert change.summary == "Added Table."
    assert change.operations[0].op == "add"


def test_remove_without_target_is_a_no_op(button_plan):
    change = build_fallback_change_plan("delete the modal", button_plan)

    assert change.summary == "No matching component found to change."
    assert change.operations == []


def test_pick_add_parent_id_falls_back_to_root():
    assert pick_add_parent_id({"tree": {"id": "top", "children": [{"id": "only"}]}}) == "top"
    assert pick_add_parent_id(None) == "root"


def test_change_plan_is_stable(button_plan):
    first = build_fallback_change_plan("add a modal", button_plan).to_wire()
    second = build_fallback_change_plan("add a modal", button_plan).to_wire()

    assert json.dumps(first) == json.dumps(second)


def test_explanation_texts():
    plan = {"layout": "Two sections.", "components": ["Card"]}

    generated = build_fallback_explanation("generate", plan, None, [])
    modified = build_fallback_explanation(
        "modify", plan, {"summary": "Removed Button."}, ["Import directives are ignored."]
    )

    assert generated.startswith("Generated a layout with Card.")
    assert "Plan layout: Two sections." in generated
    assert "All requests fit the deterministic rules." in generated
    assert modified.startswith("Applied a minimal change plan: Removed Button.")
    assert "Some requests were ignored due to deterministic rules: Import directives are ignored." in modified
    assert modified.endswith("Mock mode is enabled, so no external API calls were made.")
