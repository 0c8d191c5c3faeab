"""Structural validation of a plan tree.

The whole tree is walked and every problem is reported; validation never
stops at the first error.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Union

from uiagent.plan.models import Plan
from uiagent.plan.tree import is_text_node
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog
from uiagent.validation.result import ValidationReport

PROP_NAME_PATTERN = re.compile(r"[A-Za-z_$][\w$]*")


def _valid_prop_name(name: Any) -> bool:
    return isinstance(name, str) and PROP_NAME_PATTERN.fullmatch(name) is not None


def _validate_node(node: Any, path: str, errors: List[str], catalog: PolicyCatalog) -> None:
    if node is None or isinstance(node, str):
        return
    if not isinstance(node, dict):
        errors.append(f"Invalid node at {path}")
        return

    if is_text_node(node):
        if not isinstance(node.get("text"), str):
            errors.append(f"Text node missing text at {path}")
        return

    node_type = node.get("type")
    if not catalog.is_allowed_type(node_type):
        errors.append(f"Invalid node type {node_type} at {path}")

    props = node.get("props")
    if props is not None:
        if not isinstance(props, dict) or not all(_valid_prop_name(key) for key in props):
            errors.append(f"Invalid props at {path}")
        if isinstance(props, dict) and any(key in props for key in catalog.styling_props):
            errors.append(f"Disallowed styling props at {path}")

    children = node.get("children")
    if isinstance(children, list):
        for index, child in enumerate(children):
            _validate_node(child, f"{path}.{node_type}[{index}]", errors, catalog)


def _root_is_structural(tree: Any, catalog: PolicyCatalog) -> bool:
    return (
        isinstance(tree, dict)
        and not is_text_node(tree)
        and tree.get("type") in catalog.structural_tags
    )


def validate_plan(
    plan: Union[Plan, Mapping[str, Any], None],
    catalog: PolicyCatalog = DEFAULT_CATALOG,
) -> ValidationReport:
    tree = plan.tree if isinstance(plan, Plan) else (plan or {}).get("tree")
    if not tree:
        return ValidationReport(["Missing plan tree."])

    errors: List[str] = []
    if not _root_is_structural(tree, catalog):
        kind = tree.get("type") if isinstance(tree, dict) else type(tree).__name__
        errors.append(f"Root must be a structural tag, got {kind} at root")
    _validate_node(tree, "root", errors, catalog)
    return ValidationReport(errors)
