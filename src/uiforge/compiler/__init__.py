"""
Plan-to-Code Compiler
Plan tree in, JSX-style UI program text out.
"""

from .escape import escape_text, escape_text_content, comment_label
from .generator import (
    CompiledArtifact,
    PlanCompiler,
    compile_plan,
    fallback_artifact,
    ENTRY_POINT,
    COMPONENTS_MODULE,
)

__all__ = [
    "CompiledArtifact",
    "PlanCompiler",
    "compile_plan",
    "fallback_artifact",
    "ENTRY_POINT",
    "COMPONENTS_MODULE",
    "escape_text",
    "escape_text_content",
    "comment_label",
]
