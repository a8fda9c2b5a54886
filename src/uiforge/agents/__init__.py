"""
Agents - planner/explainer prompts and the generation pipeline.
"""

from .prompts import (
    PromptBuilder,
    planner_system_prompt,
    wants_brevity,
    EXPLAINER_SYSTEM_PROMPT,
)
from .pipeline import UIPipeline, GenerationResult, SessionView, classify_upstream

__all__ = [
    "PromptBuilder",
    "planner_system_prompt",
    "wants_brevity",
    "EXPLAINER_SYSTEM_PROMPT",
    "UIPipeline",
    "GenerationResult",
    "SessionView",
    "classify_upstream",
]
