"""
Sandboxed Render Engine
UI program text to render tree, through a closed symbol table.
"""

from .tree import RenderNode, h, normalize_children, format_number
from .library import COMPONENT_LIBRARY
from .jsx import JSXSyntaxError, JSXRuntimeError, parse_program
from .engine import RenderEngine, RenderError, RenderErrorKind
from .html import to_html, style_to_css

__all__ = [
    "RenderNode",
    "h",
    "normalize_children",
    "format_number",
    "COMPONENT_LIBRARY",
    "JSXSyntaxError",
    "JSXRuntimeError",
    "parse_program",
    "RenderEngine",
    "RenderError",
    "RenderErrorKind",
    "to_html",
    "style_to_css",
]
