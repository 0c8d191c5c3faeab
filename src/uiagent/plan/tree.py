"""Tree traversal helpers and the identifier allocator.

All traversals are pre-order: a parent is visited before its children and
children in list order. Allocation depends on that order, since it decides
which of two colliding ids is renumbered.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog

TEXT_TYPE = "text"


def is_text_node(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    return node.get("type") == TEXT_TYPE or node.get("kind") == TEXT_TYPE


def child_list(node: Dict[str, Any]) -> List[Any]:
    children = node.get("children")
    return children if isinstance(children, list) else []


def iter_nodes(node: Any) -> Iterator[Dict[str, Any]]:
    """Yield every dictionary node of the tree in pre-order."""
    if not isinstance(node, dict):
        return
    yield node
    for child in child_list(node):
        yield from iter_nodes(child)


def collect_ids(node: Any, ids: Optional[Set[str]] = None) -> Set[str]:
    ids = set() if ids is None else ids
    for item in iter_nodes(node):
        if item.get("id"):
            ids.add(item["id"])
    return ids


def find_node_with_parent(
    node: Any, node_id: Any, parent: Optional[Dict[str, Any]] = None
) -> Optional[Tuple[Dict[str, Any], Optional[Dict[str, Any]]]]:
    """Return ``(node, parent)`` for the first pre-order match of ``node_id``."""
    if not isinstance(node, dict):
        return None
    if node.get("id") == node_id:
        return node, parent
    for child in child_list(node):
        found = find_node_with_parent(child, node_id, node)
        if found:
            return found
    return None


def find_first_node_by_type(node: Any, node_type: str) -> Optional[Dict[str, Any]]:
    for item in iter_nodes(node):
        if item.get("type") == node_type:
            return item
    return None


def used_components(node: Any, catalog: PolicyCatalog = DEFAULT_CATALOG) -> List[str]:
    """Component kinds present in the tree, in the catalog's declared order."""
    found = {item.get("type") for item in iter_nodes(node) if catalog.is_component(item.get("type"))}
    return catalog.order_components(found)


class IdAllocator:
    """Hands out ``node-<n>`` / ``text-<n>`` ids that are unique against a known set.

    The counter starts at ``len(existing) + 1`` and is incremented before each
    use, skipping any candidate that is already taken.
    """

    def __init__(
        self,
        existing: Optional[Set[str]] = None,
        seed: Optional[int] = None,
        reserved: Optional[Set[str]] = None,
    ):
        self.ids: Set[str] = set(existing or ())
        self.reserved: Set[str] = set(reserved or ())
        self.counter = (len(self.ids) if seed is None else seed) + 1

    def next_id(self, prefix: str = "node") -> str:
        while True:
            self.counter += 1
            candidate = f"{prefix}-{self.counter}"
            if candidate not in self.ids and candidate not in self.reserved:
                return candidate

    def assign(self, node: Any) -> None:
        """Give every node in ``node``'s subtree an id not yet in the set."""
        if not isinstance(node, dict):
            return
        if not node.get("id") or node["id"] in self.ids:
            node["id"] = self.next_id(TEXT_TYPE if is_text_node(node) else "node")
        self.ids.add(node["id"])
        for child in child_list(node):
            self.assign(child)

    def release(self, node: Any) -> None:
        """Forget the ids of a subtree that has been detached from the tree."""
        for item in iter_nodes(node):
            self.ids.discard(item.get("id"))


def ensure_unique_ids(tree: Any) -> Any:
    """Renumber missing and duplicate ids in place; a unique tree is left untouched."""
    present = collect_ids(tree)
    allocator = IdAllocator(seed=len(present), reserved=present)
    allocator.assign(tree)
    return tree
