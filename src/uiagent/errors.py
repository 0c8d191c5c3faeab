"""Error types raised by the planning pipeline."""

from __future__ import annotations

from typing import Iterable, List


class UIAgentError(Exception):
    """Base class for every failure surfaced to the request layer."""


class MissingInput(UIAgentError):
    """The request lacks something required (intent, base plan)."""


class ModelError(UIAgentError):
    """The language model client failed to return text."""


class ParseError(UIAgentError):
    """Model output did not contain a usable JSON object."""


class _AccumulatedError(UIAgentError):
    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__(" ".join(self.errors))


class PlanValidationError(_AccumulatedError):
    pass


class CodeValidationError(_AccumulatedError):
    pass


class ChangeApplyError(_AccumulatedError):
    """One or more change-plan operations failed; the resulting plan is discarded."""
