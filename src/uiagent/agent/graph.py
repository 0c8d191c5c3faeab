"""State graph for a single generate / modify / regenerate request.

    planning -> validate_plan -> generate_code -> validate_code -> explain -> END

Every step except ``explain`` ends the run as soon as it records an error;
nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from langgraph.graph import END, START, StateGraph

from uiagent.agent.fallback import (
    build_fallback_change_plan,
    build_fallback_explanation,
    build_fallback_plan,
)
from uiagent.agent.planner import explain_with_model, plan_with_model
from uiagent.agent.prompts import PromptCache
from uiagent.agent.state import AgentState
from uiagent.codegen.generator import generate_code
from uiagent.config.settings import Settings
from uiagent.errors import (
    ChangeApplyError,
    CodeValidationError,
    ModelError,
    ParseError,
    PlanValidationError,
)
from uiagent.llm.client import CompleteFn
from uiagent.plan.apply import apply_change_plan
from uiagent.plan.models import ChangePlan
from uiagent.policy.catalog import DEFAULT_CATALOG, PolicyCatalog
from uiagent.validation.code_validator import validate_generated_code
from uiagent.validation.plan_validator import validate_plan

logger = logging.getLogger(__name__)


def _failed(message: str) -> Dict[str, Any]:
    logger.warning("Pipeline stopped: %s", message)
    return {"status": "error", "error": message}


def _route(next_node: str) -> Callable[[AgentState], str]:
    def route(state: AgentState) -> str:
        return END if state.get("error") else next_node

    return route


def _make_nodes(
    settings: Settings,
    complete: CompleteFn | None,
    prompts: PromptCache,
    catalog: PolicyCatalog,
) -> Dict[str, Callable[[AgentState], Dict[str, Any]]]:
    def planning(state: AgentState) -> Dict[str, Any]:
        mode = state["mode"]
        logger.info("Planning (%s) with %s", mode, "fallback" if state.get("use_fallback") else "model")
        try:
            if state.get("use_fallback"):
                if mode == "modify":
                    result = build_fallback_change_plan(state["user_intent"], state.get("last_plan"), catalog)
                else:
                    result = build_fallback_plan(state["user_intent"], catalog)
            else:
                result = plan_with_model(
                    state, settings=settings, complete=complete, prompts=prompts, catalog=catalog
                )
        except (ModelError, ParseError, OSError) as exc:
            return _failed(f"Planner failed: {exc}")

        if not isinstance(result, ChangePlan):
            return {"status": "planning", "plan": result.to_wire(), "change_plan": None}

        change_plan = result.to_wire()
        applied = apply_change_plan(state.get("last_plan"), result, catalog)
        if applied.errors:
            return _failed(f"Change plan failed: {ChangeApplyError(applied.errors)}")
        return {"status": "planning", "plan": applied.plan, "change_plan": change_plan}

    def validate_plan_step(state: AgentState) -> Dict[str, Any]:
        report = validate_plan(state.get("plan"), catalog)
        if not report.ok:
            return _failed(f"Plan validation failed: {PlanValidationError(report.errors)}")
        return {"status": "validating_plan"}

    def generate_code_step(state: AgentState) -> Dict[str, Any]:
        return {"status": "generating_code", "code": generate_code(state["plan"], catalog)}

    def validate_code_step(state: AgentState) -> Dict[str, Any]:
        report = validate_generated_code(state.get("code"), catalog)
        if not report.ok:
            return _failed(f"Code validation failed: {CodeValidationError(report.errors)}")
        return {"status": "validating_code"}

    def explain(state: AgentState) -> Dict[str, Any]:
        if state.get("use_fallback"):
            explanation = build_fallback_explanation(
                state["mode"], state["plan"], state.get("change_plan"), state.get("policy_notes") or []
            )
        else:
            try:
                explanation = explain_with_model(state, settings=settings, complete=complete, prompts=prompts)
            except (ModelError, OSError) as exc:
                logger.warning("Explainer failed, returning placeholder: %s", exc)
                explanation = f"Explainer failed: {exc}"
        return {"status": "done", "explanation": explanation}

    return {
        "planning": planning,
        "validate_plan": validate_plan_step,
        "generate_code": generate_code_step,
        "validate_code": validate_code_step,
        "explain": explain,
    }


def build_graph(
    settings: Settings,
    complete: CompleteFn | None = None,
    prompts: PromptCache | None = None,
    catalog: PolicyCatalog = DEFAULT_CATALOG,
):
    """Compile the request pipeline with its collaborators bound in."""

    nodes = _make_nodes(settings, complete, prompts or PromptCache(), catalog)
    order = list(nodes)

    g = StateGraph(AgentState)
    for name, fn in nodes.items():
        g.add_node(name, fn)

    g.add_edge(START, order[0])
    for current, following in zip(order, order[1:]):
        g.add_conditional_edges(current, _route(following), {following: following, END: END})
    g.add_edge(order[-1], END)
    return g.compile()
