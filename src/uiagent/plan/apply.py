"""Apply a change plan to a base plan without touching the base.

Operations run in order against a deep copy. A failing operation records an
error and the loop moves on; nothing already applied is rolled back. Callers
decide what to do with a result that carries errors (the agent pipeline
discards it wholesale).
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from uiagent.plan.models import (
    AddOperation,
    ChangePlan,
    Plan,
    RemoveOperation,
    UpdateOperation,
)
from uiagent.plan.tree import (
    IdAllocator,
    child_list,
    collect_ids,
    find_node_with_parent,
    used_components,
)
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog

logger = logging.getLogger(__name__)

PlanLike = Union[Plan, Mapping[str, Any]]
ChangePlanLike = Union[ChangePlan, Mapping[str, Any]]


@dataclass
class ApplyResult:
    plan: Optional[Dict[str, Any]]
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _as_wire_plan(plan: Optional[PlanLike]) -> Optional[Dict[str, Any]]:
    if isinstance(plan, Plan):
        return plan.to_wire()
    return plan  # type: ignore[return-value]


def _insert(children: List[Any], position: Union[str, int], node: Dict[str, Any]) -> None:
    if position == "start":
        children.insert(0, node)
    elif position == "end":
        children.append(node)
    else:
        # list.insert clamps out-of-range indices the same way Array.splice does
        children.insert(position, node)


def _apply_add(tree: Dict[str, Any], op: AddOperation, allocator: IdAllocator) -> Optional[str]:
    found = find_node_with_parent(tree, op.parent_id)
    if not found:
        return f"Add failed: parent {op.parent_id} not found."
    parent, _ = found

    new_node = copy.deepcopy(op.node)
    allocator.assign(new_node)

    if not isinstance(parent.get("children"), list):
        parent["children"] = []
    _insert(parent["children"], op.position, new_node)
    return None


def _apply_remove(tree: Dict[str, Any], op: RemoveOperation) -> Optional[str]:
    if op.target_id == tree.get("id"):
        return "Cannot remove root node."
    found = find_node_with_parent(tree, op.target_id)
    if not found or found[1] is None:
        return f"Remove failed: node {op.target_id} not found."
    parent = found[1]
    parent["children"] = [
        child
        for child in child_list(parent)
        if not (isinstance(child, dict) and child.get("id") == op.target_id)
    ]
    return None


def _apply_update(tree: Dict[str, Any], op: UpdateOperation, allocator: IdAllocator) -> Optional[str]:
    found = find_node_with_parent(tree, op.target_id)
    if not found:
        return f"Update failed: node {op.target_id} not found."
    node, _ = found

    if op.props is not None:
        existing = node.get("props") if isinstance(node.get("props"), dict) else {}
        node["props"] = {**existing, **copy.deepcopy(op.props)}
    if op.text is not None:
        node["text"] = op.text
    if op.children is not None:
        for child in child_list(node):
            allocator.release(child)
        replacement = copy.deepcopy(op.children)
        for child in replacement:
            allocator.assign(child)
        node["children"] = replacement
    return None


def apply_change_plan(
    base_plan: Optional[PlanLike],
    change_plan: ChangePlanLike,
    catalog: PolicyCatalog = DEFAULT_CATALOG,
) -> ApplyResult:
    """Return a new plan with ``change_plan`` applied, plus per-operation errors."""

    wire_base = _as_wire_plan(base_plan)
    base_tree = wire_base.get("tree") if isinstance(wire_base, Mapping) else None
    if not isinstance(base_tree, dict) or not base_tree:
        return ApplyResult(plan=wire_base, errors=["Missing base plan."])

    if not isinstance(change_plan, ChangePlan):
        change_plan = ChangePlan.model_validate(change_plan)

    plan = copy.deepcopy(dict(wire_base))
    tree = plan["tree"]
    allocator = IdAllocator(collect_ids(tree))
    errors: List[str] = []

    for op in change_plan.operations:
        if isinstance(op, AddOperation):
            error = _apply_add(tree, op, allocator)
        elif isinstance(op, RemoveOperation):
            error = _apply_remove(tree, op)
        else:
            error = _apply_update(tree, op, allocator)
        if error:
            logger.warning("Change plan operation rejected: %s", error)
            errors.append(error)

    plan["components"] = used_components(tree, catalog)
    return ApplyResult(plan=plan, errors=errors)
