"""Entry point used by the request layer."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from uiagent.agent.graph import build_graph
from uiagent.agent.prompts import PromptCache
from uiagent.agent.state import MODES, AgentState
from uiagent.config.settings import Settings, get_settings
from uiagent.errors import MissingInput
from uiagent.llm.client import CompleteFn, make_complete
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog
from uiagent.validation.policy_notes import detect_policy_violations

logger = logging.getLogger(__name__)


class UIAgent:
    """Long-lived holder of the compiled pipeline and its prompt cache.

    Requests share nothing but the read-only prompt cache: each one carries the
    previous plan in and gets a new plan out.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        complete: Optional[CompleteFn] = None,
        prompts: Optional[PromptCache] = None,
        catalog: PolicyCatalog = DEFAULT_CATALOG,
    ):
        self.settings = settings or get_settings()
        if complete is None and self.settings.has_model_credentials:
            complete = make_complete(self.settings)
        self.complete = complete
        self.prompts = prompts or PromptCache()
        self.catalog = catalog
        self.graph = build_graph(self.settings, self.complete, self.prompts, catalog)

    @property
    def uses_fallback(self) -> bool:
        return self.settings.mock_agent or self.complete is None

    def _initial_state(self, request: Mapping[str, Any]) -> AgentState:
        mode = request.get("mode") or "generate"
        if mode not in MODES:
            logger.info("Unknown mode %r, treating it as generate", mode)
            mode = "generate"

        last_plan = request.get("lastPlan")
        if mode == "modify":
            if not last_plan:
                raise MissingInput("Modify requested without an existing plan.")
            if not isinstance(last_plan, Mapping) or not isinstance(last_plan.get("tree"), dict):
                raise MissingInput("Last plan has no tree to modify.")

        intent = request.get("userIntent")
        if not isinstance(intent, str) or not intent.strip():
            raise MissingInput("User intent is required.")

        return {
            "mode": mode,
            "user_intent": intent,
            "current_code": request.get("currentCode") or "",
            "last_plan": last_plan,
            "policy_notes": detect_policy_violations(intent),
            "use_fallback": self.uses_fallback,
            "status": "idle",
        }

    def run(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        """Run one request; returns the result payload or ``{"error": message}``."""
        try:
            state = self._initial_state(request)
        except MissingInput as exc:
            return {"error": str(exc)}

        if state["use_fallback"] and not self.settings.mock_agent:
            logger.warning("No model configured, using the deterministic fallback planner")

        final = self.graph.invoke(state)
        if final.get("error"):
            return {"error": final["error"]}

        result: Dict[str, Any] = {
            "plan": final["plan"],
            "code": final["code"],
            "explanation": final["explanation"],
            "changePlan": final.get("change_plan"),
        }
        if state["use_fallback"]:
            result["mock"] = True
        return result


def run_agent(request: Mapping[str, Any], **kwargs: Any) -> Dict[str, Any]:
    """One-shot convenience wrapper around :class:`UIAgent`."""
    return UIAgent(**kwargs).run(request)
