"""
Plan Schema
Typed plan models, whitelist validation and oracle output parsing.
"""

from .models import Plan, PlanNode
from .validator import PlanValidator, validate_plan, check_plan
from .parser import parse_plan_text, MAX_PLAN_SIZE

__all__ = [
    "Plan",
    "PlanNode",
    "PlanValidator",
    "validate_plan",
    "check_plan",
    "parse_plan_text",
    "MAX_PLAN_SIZE",
]
