"""Rule-based planner used when no language model is configured.

Everything here is deterministic: the same intent and base plan always give
byte-identical plans and change plans. The output goes through exactly the
same validators as model output.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

from uiagent.plan.models import (
    AddOperation,
    ChangePlan,
    Plan,
    RemoveOperation,
    UpdateOperation,
)
from uiagent.plan.tree import find_first_node_by_type
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog

COMPONENT_KEYWORDS = (
    ("navbar", "Navbar"),
    ("navigation", "Navbar"),
    ("sidebar", "Sidebar"),
    ("menu", "Sidebar"),
    ("card", "Card"),
    ("chart", "Chart"),
    ("graph", "Chart"),
    ("table", "Table"),
    ("modal", "Modal"),
    ("dialog", "Modal"),
    ("input", "Input"),
    ("form", "Input"),
    ("button", "Button"),
    ("cta", "Button"),
)
DEFAULT_COMPONENTS = ("Navbar", "Card", "Button")

FALLBACK_LAYOUT = "Header section with optional navigation and a content row for components."
ROOT_ID = "root"

_REMOVE_VERBS = re.compile(r"(remove|delete|drop)", re.I)
_UPDATE_VERBS = re.compile(r"(update|change|edit|rename)", re.I)
_ADD_VERBS = re.compile(r"(add|include|insert|append|create)", re.I)


class IdFactory:
    """Sequential ids shared between element and text nodes of one tree."""

    def __init__(self) -> None:
        self.counter = 0

    def next_node_id(self) -> str:
        self.counter += 1
        return f"node-{self.counter}"

    def next_text_id(self) -> str:
        self.counter += 1
        return f"text-{self.counter}"


def _text(ids: IdFactory, text: str) -> Dict[str, Any]:
    return {"id": ids.next_text_id(), "type": "text", "text": text}


def _node(
    ids: IdFactory,
    node_type: str,
    props: Optional[Dict[str, Any]] = None,
    children: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    return {
        "id": ids.next_node_id(),
        "type": node_type,
        "props": props or {},
        "children": children or [],
    }


def pick_components(intent: Optional[str], catalog: PolicyCatalog = DEFAULT_CATALOG) -> List[str]:
    lower = (intent or "").lower()
    found = {component for keyword, component in COMPONENT_KEYWORDS if keyword in lower}
    if not found:
        found = set(DEFAULT_COMPONENTS)
    return catalog.order_components(found)


def _button(ids: IdFactory, label: str = "Primary Action") -> Dict[str, Any]:
    return _node(ids, "Button", {}, [_text(ids, label)])


def _content_node(kind: str, ids: IdFactory, nest_button: bool) -> Optional[Dict[str, Any]]:
    if kind == "Card":
        children = [_text(ids, "Snapshot of the latest activity and highlights.")]
        if nest_button:
            children.append(_button(ids))
        return _node(ids, "Card", {"title": "Highlights"}, children)
    if kind == "Chart":
        return _node(ids, "Chart", {"title": "Weekly Activity"})
    if kind == "Table":
        return _node(
            ids,
            "Table",
            {
                "columns": ["Metric", "Value"],
                "rows": [
                    ["Active Users", "1,204"],
                    ["Conversion", "4.2%"],
                    ["Sessions", "8,910"],
                ],
            },
        )
    if kind == "Input":
        return _node(ids, "Input", {"label": "Search", "placeholder": "Filter by keyword"})
    if kind == "Modal":
        return _node(
            ids,
            "Modal",
            {"title": "Invite Collaborators", "open": True},
            [_text(ids, "Send an invite to your teammates.")],
        )
    if kind == "Button" and not nest_button:
        return _button(ids)
    return None


def build_fallback_plan(intent: Optional[str], catalog: PolicyCatalog = DEFAULT_CATALOG) -> Plan:
    """Canonical two-section layout: a header, then a row of side panel and content."""
    components = pick_components(intent, catalog)
    ids = IdFactory()

    if "Navbar" in components:
        header_child = _node(
            ids,
            "Navbar",
            {"title": "Project Atlas", "links": ["Overview", "Metrics", "Settings"]},
        )
    else:
        header_child = _text(ids, "Workspace Overview")
    header_section = _node(ids, "section", {}, [header_child])

    body_children: List[Dict[str, Any]] = []
    if "Sidebar" in components:
        body_children.append(
            _node(ids, "Sidebar", {"title": "Sections", "items": ["Summary", "Reports", "Alerts"]})
        )

    # the single action control lives inside the card when there is one
    nest_button = "Button" in components and "Card" in components
    content_children: List[Dict[str, Any]] = []
    for kind in catalog.component_kinds:
        if kind not in components:
            continue
        node = _content_node(kind, ids, nest_button)
        if node is not None:
            content_children.append(node)

    if not content_children:
        content_children.append(_text(ids, "No UI components requested."))

    content_section = _node(ids, "section", {}, content_children)
    body_row = _node(ids, "div", {}, [*body_children, content_section])
    main_section = _node(ids, "section", {}, [body_row])

    return Plan(
        layout=FALLBACK_LAYOUT,
        components=components,
        tree={
            "id": ROOT_ID,
            "type": "div",
            "props": {},
            "children": [header_section, main_section],
        },
    )


def pick_add_parent_id(plan: Optional[Dict[str, Any]]) -> str:
    """Second top-level child of the root when present, otherwise the root."""
    tree = (plan or {}).get("tree") or {}
    children = tree.get("children") or []
    if len(children) > 1 and isinstance(children[1], dict) and children[1].get("id"):
        return children[1]["id"]
    return tree.get("id") or ROOT_ID


def build_fallback_node(kind: str) -> Dict[str, Any]:
    """A fresh subtree for an ``add`` operation; its ids are renumbered on apply."""
    ids = IdFactory()
    if kind == "Navbar":
        return _node(ids, "Navbar", {"title": "Updated Navigation", "links": ["Home", "Insights", "Settings"]})
    if kind == "Sidebar":
        return _node(ids, "Sidebar", {"title": "Quick Links", "items": ["Overview", "Pipeline", "Alerts"]})
    if kind == "Chart":
        return _node(ids, "Chart", {"title": "Updated Chart"})
    if kind == "Table":
        return _node(
            ids,
            "Table",
            {"columns": ["Name", "Status"], "rows": [["Onboarding", "Active"], ["Review", "Pending"]]},
        )
    if kind == "Input":
        return _node(ids, "Input", {"label": "Updated Input", "placeholder": "Type here"})
    if kind == "Modal":
        return _node(
            ids,
            "Modal",
            {"title": "Updated Modal", "open": True},
            [_text(ids, "Mock modal content.")],
        )
    if kind == "Button":
        return _button(ids, "New Action")
    return _node(ids, "Card", {"title": "New Card"}, [_text(ids, "Added by mock change plan.")])


UPDATE_PROPS = {
    "Card": {"title": "Updated Summary"},
    "Navbar": {"title": "Updated Navigation"},
    "Sidebar": {"items": ["Updated", "Links", "List"]},
    "Table": {"rows": [["Updated", "Row"], ["Another", "Row"]]},
    "Chart": {"title": "Updated Chart"},
    "Input": {"placeholder": "Updated placeholder"},
    "Modal": {"title": "Updated Modal"},
}


def _update_operation(kind: str, target_id: str) -> UpdateOperation:
    if kind == "Button":
        return UpdateOperation(
            op="update",
            target_id=target_id,
            children=[{"id": "text-900", "type": "text", "text": "Updated Action"}],
        )
    return UpdateOperation(op="update", target_id=target_id, props=dict(UPDATE_PROPS.get(kind, {})))


def build_fallback_change_plan(
    intent: Optional[str],
    last_plan: Optional[Dict[str, Any]],
    catalog: PolicyCatalog = DEFAULT_CATALOG,
) -> ChangePlan:
    """Synthesize at most one operation from the verbs and component named in ``intent``.

    Remove verbs take priority over update verbs, which take priority over add
    verbs. Without any verb the request is treated as an add.
    """
    intent = intent or ""
    target_kind = (pick_components(intent, catalog) or ["Card"])[0]
    tree = (last_plan or {}).get("tree")
    target = find_first_node_by_type(tree, target_kind) if tree else None

    wants_remove = bool(_REMOVE_VERBS.search(intent))
    wants_update = bool(_UPDATE_VERBS.search(intent))
    wants_add = bool(_ADD_VERBS.search(intent))

    if wants_remove and target:
        return ChangePlan(
            summary=f"Removed {target_kind}.",
            operations=[RemoveOperation(op="remove", target_id=target["id"])],
        )
    if wants_update and target:
        return ChangePlan(
            summary=f"Updated {target_kind}.",
            operations=[_update_operation(target_kind, target["id"])],
        )
    if wants_add or not wants_remove:
        return ChangePlan(
            summary=f"Added {target_kind}.",
            operations=[
                AddOperation(
                    op="add",
                    parent_id=pick_add_parent_id(last_plan),
                    position="end",
                    node=build_fallback_node(target_kind),
                )
            ],
        )
    return ChangePlan(summary="No matching component found to change.", operations=[])


def build_fallback_explanation(
    mode: str,
    plan: Dict[str, Any],
    change_plan: Optional[Dict[str, Any]],
    policy_notes: Sequence[str],
) -> str:
    components = plan.get("components") or []
    if mode == "modify":
        summary = (change_plan or {}).get("summary") or "updated the layout."
        intro = f"Applied a minimal change plan: {summary}"
    else:
        component_list = ", ".join(components) if components else "No components"
        intro = f"Generated a layout with {component_list}."

    if policy_notes:
        policy_text = "Some requests were ignored due to deterministic rules: " + " ".join(policy_notes)
    else:
        policy_text = "All requests fit the deterministic rules."

    return (
        f"{intro}\n\nPlan layout: {plan.get('layout', '')}\n\n{policy_text}\n\n"
        "Mock mode is enabled, so no external API calls were made."
    )
