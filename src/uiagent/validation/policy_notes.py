"""Advisory detection of requests the safety envelope will ignore.

These notes never block a request; they are appended to the explanation so the
user knows why a styling or import request had no effect.
"""

from __future__ import annotations

import re
from typing import List, Optional

_STYLING = re.compile(
    r"(tailwind|classname|inline style|styled-components|@mui|chakra|material ui|bootstrap)",
    re.I,
)
_NEW_COMPONENT = re.compile(r"(create a new component|new component|custom component)", re.I)
_IMPORT_DIRECTIVE = re.compile(r"import\s+.*from\s+['\"]", re.I)

STYLING_NOTE = "Styling or external UI library request ignored."
NEW_COMPONENT_NOTE = "Requests for new components are ignored."
IMPORT_NOTE = "Import directives are ignored."


def detect_policy_violations(intent: Optional[str] = "") -> List[str]:
    intent = intent or ""
    notes: List[str] = []
    if _STYLING.search(intent):
        notes.append(STYLING_NOTE)
    if _NEW_COMPONENT.search(intent):
        notes.append(NEW_COMPONENT_NOTE)
    if _IMPORT_DIRECTIVE.search(intent):
        notes.append(IMPORT_NOTE)
    return notes


def format_policy_notes(notes: List[str]) -> str:
    return " ".join(notes) if notes else "None."
