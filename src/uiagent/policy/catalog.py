"""The fixed safety envelope: allowed components, tags, imports and code patterns.

The catalog is a plain immutable value. Validators, the code generator and the
fallback planner all receive it as an argument (defaulting to
:data:`DEFAULT_CATALOG`), so alternative catalogs can be tested without touching
their control flow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Pattern, Tuple


@dataclass(frozen=True)
class DisallowedPattern:
    """A textual pattern that must never appear in generated source."""

    name: str
    regex: Pattern[str]
    message: str

    def search(self, source: str) -> bool:
        return self.regex.search(source) is not None


@dataclass(frozen=True)
class PolicyCatalog:
    version: str
    component_kinds: Tuple[str, ...]
    structural_tags: Tuple[str, ...]
    styling_props: Tuple[str, ...]
    allowed_imports: Tuple[str, ...]
    component_import_path: str
    default_component: str
    disallowed_patterns: Tuple[DisallowedPattern, ...] = field(default_factory=tuple)
    import_pattern: Pattern[str] = re.compile(r"\bimport\s+(?:[^;'\"]+?\s*from\s*)?[\"']([^\"']+)[\"']")
    tag_pattern: Pattern[str] = re.compile(r"<\s*([A-Za-z][A-Za-z0-9]*)")

    @property
    def allowed_types(self) -> Tuple[str, ...]:
        """Component kinds followed by structural tags."""
        return self.component_kinds + self.structural_tags

    def is_component(self, value: object) -> bool:
        return isinstance(value, str) and value in self.component_kinds

    def is_allowed_type(self, value: object) -> bool:
        return isinstance(value, str) and value in self.allowed_types

    def order_components(self, kinds) -> list[str]:
        """Return ``kinds`` in the catalog's declared order, dropping unknown names."""
        wanted = set(kinds)
        return [kind for kind in self.component_kinds if kind in wanted]


DEFAULT_CATALOG = PolicyCatalog(
    version="2024.1",
    component_kinds=(
        "Button",
        "Card",
        "Input",
        "Table",
        "Modal",
        "Sidebar",
        "Navbar",
        "Chart",
    ),
    structural_tags=("div", "section"),
    styling_props=("className", "style"),
    allowed_imports=("./ui-kit", "./ui-kit/index", "./ui-kit/index.js"),
    component_import_path="./ui-kit",
    default_component="Card",
    disallowed_patterns=(
        DisallowedPattern("class_name", re.compile(r"className\s*="), "className is not allowed"),
        DisallowedPattern("inline_style", re.compile(r"style\s*="), "style props are not allowed"),
        DisallowedPattern("tailwind", re.compile(r"tailwind", re.I), "Tailwind usage is not allowed"),
        DisallowedPattern("material_ui", re.compile(r"@mui", re.I), "Material UI imports are not allowed"),
        DisallowedPattern("chakra", re.compile(r"chakra", re.I), "Chakra UI imports are not allowed"),
        DisallowedPattern(
            "styled_components",
            re.compile(r"styled-components", re.I),
            "styled-components are not allowed",
        ),
    ),
)
