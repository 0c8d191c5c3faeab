"""Model-driven planning and explanation steps."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Union

from pydantic import ValidationError

from uiagent.agent.prompts import PromptCache, fill_prompt
from uiagent.agent.state import AgentState
from uiagent.config.settings import Settings
from uiagent.errors import ParseError
from uiagent.llm.client import CompleteFn
from uiagent.plan.models import ChangePlan, Plan
from uiagent.plan.tree import ensure_unique_ids, used_components
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog
from uiagent.utils.parsing import extract_json, truncate
from uiagent.validation.policy_notes import format_policy_notes

logger = logging.getLogger(__name__)

PLANNER_TEMPLATE = "planner.jinja"
EXPLAINER_TEMPLATE = "explainer.jinja"


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2) if value else "(none)"


def plan_with_model(
    state: AgentState,
    *,
    settings: Settings,
    complete: CompleteFn,
    prompts: PromptCache,
    catalog: PolicyCatalog = DEFAULT_CATALOG,
) -> Union[Plan, ChangePlan]:
    """Ask the model for a plan (generate/regenerate) or a change plan (modify).

    Raises :class:`ModelError` when the call fails and :class:`ParseError` when
    the reply does not hold a JSON object of the expected shape.
    """

    limit = settings.prompt_char_limit
    prompt = fill_prompt(
        prompts.load(PLANNER_TEMPLATE),
        {
            "MODE": state["mode"],
            "USER_INTENT": truncate(state.get("user_intent"), limit),
            "CURRENT_CODE": truncate(state.get("current_code"), limit),
            "LAST_PLAN": _pretty(state.get("last_plan")),
            "POLICY_NOTES": format_policy_notes(state.get("policy_notes") or []),
        },
    )
    output = complete(prompt, settings.model, settings.planner_temperature)
    logger.debug("Planner raw output: %s", output)
    data = extract_json(output)

    try:
        if state["mode"] == "modify":
            return ChangePlan.model_validate(data)
        plan = Plan.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"Unexpected planner output shape: {exc.error_count()} error(s).") from exc

    if plan.tree:
        ensure_unique_ids(plan.tree)
        plan = plan.model_copy(update={"components": used_components(plan.tree, catalog)})
    return plan


def explain_with_model(
    state: AgentState,
    *,
    settings: Settings,
    complete: CompleteFn,
    prompts: PromptCache,
) -> str:
    limit = settings.prompt_char_limit
    notes = state.get("policy_notes") or []
    prompt = fill_prompt(
        prompts.load(EXPLAINER_TEMPLATE),
        {
            "MODE": state["mode"],
            "USER_INTENT": truncate(state.get("user_intent"), limit),
            "POLICY_NOTES": format_policy_notes(notes),
            "PLAN": _pretty(state.get("plan")),
            "CHANGE_PLAN": _pretty(state.get("change_plan")),
        },
    )
    explanation = complete(prompt, settings.model, settings.explainer_temperature)
    if notes:
        explanation = f"{explanation.rstrip()}\n\nPolicy notes: {' '.join(notes)}"
    return explanation
