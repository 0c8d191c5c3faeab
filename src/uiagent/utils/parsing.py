from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from uiagent.errors import ParseError

_CODE_FENCE = re.compile(r"```[a-zA-Z]*\n?")

TRUNCATION_MARKER = "\n...[truncated]"


def truncate(value: Optional[str], limit: int = 6000) -> str:
    if not value:
        return ""
    if len(value) <= limit:
        return value
    return value[:limit] + TRUNCATION_MARKER


def strip_code_fence(text: str) -> str:
    return _CODE_FENCE.sub("", text)


def extract_json(text: Optional[str]) -> Dict[str, Any]:
    """Parse the outermost ``{...}`` span of a model reply."""
    cleaned = strip_code_fence(text or "").strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ParseError("No JSON object found in response.")
    try:
        return json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ParseError(str(exc)) from exc
