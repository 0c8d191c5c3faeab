"""Deterministic serialization of a validated plan into markup source.

Output shape::

    import { Card, Button } from "./ui-kit";

    export default function GeneratedUI() {
      return (
        <div>
          ...
        </div>
      );
    }

The import line lists the component kinds used by the tree in catalog order.
Children are indented two spaces per level below the root, which itself sits
at four spaces.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Union

from uiagent.plan.models import Plan
from uiagent.plan.tree import child_list, is_text_node, used_components
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog

ROOT_INDENT = "    "
INDENT_STEP = "  "
ENTRY_POINT = "GeneratedUI"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "'": "\\u0027",
    "import": "\\u0069mport",
}
_MARKUP_SPECIAL = set("{}<>'\"")


def json_literal(value: Any) -> str:
    """Compact JSON that cannot be read back as a tag or an import.

    Angle brackets, ampersands and single quotes are unicode-escaped, and so is
    the first letter of every ``import`` keyword. Every word in compact JSON
    sits inside a string literal, so the escapes keep the value unchanged.
    """
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for char, escape in _HTML_ESCAPES.items():
        text = text.replace(char, escape)
    return text


def _format_props(props: Any) -> str:
    if not isinstance(props, dict):
        return ""
    return "".join(
        f" {name}={{{json_literal(value)}}}" for name, value in props.items() if value is not None
    )


def _format_text(text: str) -> str:
    if _MARKUP_SPECIAL.intersection(text) or "import" in text:
        return "{" + json_literal(text) + "}"
    return text


def _node_to_markup(node: Any, indent: str) -> str:
    if isinstance(node, str):
        return f"{indent}{_format_text(node)}"
    if is_text_node(node):
        return f"{indent}{_format_text(node.get('text') or '')}"

    node_type = node.get("type")
    open_tag = f"<{node_type}{_format_props(node.get('props'))}>"
    children = [child for child in child_list(node) if child is not None]
    if not children:
        return f"{indent}{open_tag}</{node_type}>"

    child_lines = "\n".join(_node_to_markup(child, indent + INDENT_STEP) for child in children)
    return f"{indent}{open_tag}\n{child_lines}\n{indent}</{node_type}>"


def _import_line(components: List[str], catalog: PolicyCatalog) -> str:
    names = components or [catalog.default_component]
    return f'import {{ {", ".join(names)} }} from "{catalog.component_import_path}";'


def generate_code(
    plan: Union[Plan, Mapping[str, Any]],
    catalog: PolicyCatalog = DEFAULT_CATALOG,
) -> str:
    tree: Dict[str, Any] = plan.tree if isinstance(plan, Plan) else plan["tree"]
    import_line = _import_line(used_components(tree, catalog), catalog)
    markup = _node_to_markup(tree, ROOT_INDENT)
    return (
        f"{import_line}\n\n"
        f"export default function {ENTRY_POINT}() {{\n"
        f"  return (\n{markup}\n  );\n"
        "}\n"
    )
