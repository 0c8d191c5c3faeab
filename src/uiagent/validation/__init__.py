"""Static checks of plan trees and generated source against the policy catalog."""

from .code_validator import tokenize_imports, tokenize_tags, validate_generated_code
from .plan_validator import validate_plan
from .policy_notes import detect_policy_violations
from .result import ValidationReport

__all__ = [
    "ValidationReport",
    "detect_policy_violations",
    "tokenize_imports",
    "tokenize_tags",
    "validate_generated_code",
    "validate_plan",
]
