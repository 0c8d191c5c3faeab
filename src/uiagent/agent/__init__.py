"""Planning pipeline: fallback planner, model steps and the request graph."""

from .runner import UIAgent, run_agent
from .state import AgentState

__all__ = ["AgentState", "UIAgent", "run_agent"]
