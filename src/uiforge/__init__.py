"""
uiforge
Natural-language UI generation constrained to a fixed component library.
"""

from .registry import ComponentRegistry, default_registry
from .plan import Plan, PlanNode, PlanValidator, validate_plan
from .compiler import CompiledArtifact, PlanCompiler, compile_plan
from .render import RenderEngine, RenderError, RenderNode, to_html
from .sessions import SessionStore
from .agents import UIPipeline, GenerationResult

__version__ = "0.1.0"

__all__ = [
    "ComponentRegistry",
    "default_registry",
    "Plan",
    "PlanNode",
    "PlanValidator",
    "validate_plan",
    "CompiledArtifact",
    "PlanCompiler",
    "compile_plan",
    "RenderEngine",
    "RenderError",
    "RenderNode",
    "to_html",
    "SessionStore",
    "UIPipeline",
    "GenerationResult",
]
