"""Last line of defense: static checks over generated source text.

The source is never trusted to have come from a valid tree. It is scanned with
the catalog's pattern table for disallowed constructs, and tokenized into
import targets and opening tag names which are checked against the allowlists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog
from uiagent.validation.result import ValidationReport


@dataclass(frozen=True)
class SourceToken:
    kind: str
    value: str
    offset: int


def tokenize_imports(source: str, catalog: PolicyCatalog = DEFAULT_CATALOG) -> List[SourceToken]:
    """Module references of every import statement, in source order."""
    return [
        SourceToken("import", match.group(1), match.start(1))
        for match in catalog.import_pattern.finditer(source)
    ]


def tokenize_tags(source: str, catalog: PolicyCatalog = DEFAULT_CATALOG) -> List[SourceToken]:
    """Opening tag names, first occurrence of each name only."""
    seen = set()
    tokens: List[SourceToken] = []
    for match in catalog.tag_pattern.finditer(source):
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)
        tokens.append(SourceToken("tag", name, match.start(1)))
    return tokens


def validate_generated_code(source: Any, catalog: PolicyCatalog = DEFAULT_CATALOG) -> ValidationReport:
    if not source or not isinstance(source, str):
        return ValidationReport(["No code to validate."])

    errors: List[str] = []

    for pattern in catalog.disallowed_patterns:
        if pattern.search(source):
            errors.append(pattern.message)

    for token in tokenize_imports(source, catalog):
        if token.value not in catalog.allowed_imports:
            errors.append(f"Invalid import target: {token.value}")

    for token in tokenize_tags(source, catalog):
        if not catalog.is_allowed_type(token.value):
            errors.append(f"Invalid JSX tag: {token.value}")

    return ValidationReport(errors)
