"""Plan tree model, identifier allocation and the change-plan apply engine."""

from .apply import ApplyResult, apply_change_plan
from .models import AddOperation, ChangePlan, Plan, RemoveOperation, UpdateOperation
from .tree import IdAllocator, collect_ids, ensure_unique_ids, find_node_with_parent

__all__ = [
    "AddOperation",
    "ApplyResult",
    "ChangePlan",
    "IdAllocator",
    "Plan",
    "RemoveOperation",
    "UpdateOperation",
    "apply_change_plan",
    "collect_ids",
    "ensure_unique_ids",
    "find_node_with_parent",
]
