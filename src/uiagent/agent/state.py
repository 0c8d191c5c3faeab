"""State schema shared across pipeline nodes."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from typing_extensions import NotRequired, Required, TypedDict

MODES = ("generate", "modify", "regenerate")


class AgentState(TypedDict, total=False):
    """One request's progress through planning, validation, generation and explanation."""

    mode: Required[str]
    user_intent: Required[str]
    current_code: NotRequired[str]
    last_plan: NotRequired[Optional[Dict[str, Any]]]
    policy_notes: NotRequired[List[str]]
    use_fallback: NotRequired[bool]

    plan: NotRequired[Dict[str, Any]]
    change_plan: NotRequired[Optional[Dict[str, Any]]]
    code: NotRequired[str]
    explanation: NotRequired[str]

    status: NotRequired[str]
    error: NotRequired[str]
