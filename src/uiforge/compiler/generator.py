"""
Plan-to-Code Compiler
Deterministically lowers a plan tree into a JSX-style UI program that
references only whitelisted components. No model involved.
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..core import get_logger, hash_string, safe_json_dumps
from ..plan.models import Plan
from ..registry import ComponentRegistry, default_registry
from .escape import comment_label, escape_text, escape_text_content

logger = get_logger(__name__)

ENTRY_POINT = "GeneratedUI"
COMPONENTS_MODULE = "./components"

_PROP_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class CompiledArtifact(BaseModel):
    """Compiled UI program plus the components it references."""

    model_config = ConfigDict(frozen=True)

    code: str
    components: tuple[str, ...] = ()
    entry_point: str = ENTRY_POINT

    @property
    def digest(self) -> str:
        """Stable fingerprint of the program text."""
        return hash_string(self.code)

    @property
    def is_empty(self) -> bool:
        return not self.components


def fallback_artifact() -> CompiledArtifact:
    """Artifact for a missing or unusable plan."""
    code = (
        "// No layout plan provided: no UI generated yet.\n"
        f"export default function {ENTRY_POINT}() {{\n"
        "  return null;\n"
        "}"
    )
    return CompiledArtifact(code=code)


class PlanCompiler:
    """
    Compiles plans into UI program text.

    Pure and deterministic: the same plan always yields the same artifact.
    Unregistered component types are re-checked here and replaced by an inert
    comment, so nothing outside the whitelist is ever referenced even when
    validation was skipped.
    """

    def __init__(self, registry: ComponentRegistry | None = None, indent_width: int = 2) -> None:
        self.registry = registry or default_registry()
        self.indent_width = indent_width

    def compile(self, plan: Plan | Mapping[str, Any] | None) -> CompiledArtifact:
        """
        Compile a plan (typed or wire format).

        Args:
            plan: Plan model, ``{"layout": ...}`` mapping, or None

        Returns:
            Compiled artifact; the fallback artifact when there is no usable layout
        """
        layout = self._layout_of(plan)
        if not isinstance(layout, Mapping) or not layout.get("type"):
            return fallback_artifact()

        used: dict[str, None] = {}
        try:
            if layout["type"] in self.registry:
                body = self._render_node(layout, 4, used)
                statement = f"  return (\n{body}\n  );"
            else:
                self._log_blocked(layout["type"])
                statement = f"  // Blocked prohibited component: \"{comment_label(layout['type'])}\"\n  return null;"
        except RecursionError:
            logger.error("plan_too_deep")
            return fallback_artifact()

        components = tuple(used)
        import_line = (
            f'import {{ {", ".join(components)} }} from "{COMPONENTS_MODULE}";\n\n' if components else ""
        )
        code = f"{import_line}export default function {ENTRY_POINT}() {{\n{statement}\n}}"

        return CompiledArtifact(code=code, components=components)

    @staticmethod
    def _layout_of(plan: Plan | Mapping[str, Any] | None) -> Any:
        if isinstance(plan, Plan):
            return plan.to_wire()["layout"]
        if isinstance(plan, Mapping):
            return plan.get("layout")
        return None

    def _render_node(self, node: Any, indent: int, used: dict[str, None]) -> str | None:
        pad = " " * indent

        if isinstance(node, str):
            return f"{pad}{escape_text_content(node)}"

        if not isinstance(node, Mapping) or not node.get("type"):
            return None

        node_type = node["type"]
        if node_type not in self.registry:
            self._log_blocked(node_type)
            return f'{pad}{{/* Blocked prohibited component: "{comment_label(node_type)}" */}}'

        used.setdefault(node_type, None)

        props = node.get("props")
        if not isinstance(props, Mapping):
            props = {}

        attrs = self._render_props(props)
        text = props.get("children")
        text = escape_text_content(text) if isinstance(text, str) else None

        rendered = []
        for child in self._children_of(node):
            line = self._render_node(child, indent + self.indent_width, used)
            if line is not None:
                rendered.append(line)

        if not rendered and text is None:
            return f"{pad}<{node_type}{attrs} />"

        if not rendered:
            return f"{pad}<{node_type}{attrs}>{text}</{node_type}>"

        lines = [f"{pad}<{node_type}{attrs}>"]
        if text is not None:
            lines.append(f"{pad}{' ' * self.indent_width}{text}")
        lines.extend(rendered)
        lines.append(f"{pad}</{node_type}>")
        return "\n".join(lines)

    @staticmethod
    def _children_of(node: Mapping[str, Any]) -> list[Any]:
        children = node.get("children")
        if isinstance(children, str):
            return [children]
        if isinstance(children, list):
            return children
        return []

    def _render_props(self, props: Mapping[str, Any]) -> str:
        parts = []
        for key, value in props.items():
            if key == "children":
                continue  # rendered as content
            if not isinstance(key, str) or not _PROP_NAME.match(key):
                logger.warning("prop_dropped", prop=str(key)[:50])
                continue

            if isinstance(value, str):
                parts.append(f' {key}="{escape_text(value)}"')
            elif isinstance(value, bool):
                parts.append(f" {key}" if value else f" {key}={{false}}")
            else:
                # numbers, arrays, objects, null: embedded JSON literal, no raw "<"
                literal = safe_json_dumps(value).replace("<", "\\u003c")
                parts.append(f" {key}={{{literal}}}")
        return "".join(parts)

    @staticmethod
    def _log_blocked(node_type: Any) -> None:
        logger.warning("component_blocked", type=str(node_type)[:100])


_default_compiler: PlanCompiler | None = None


def compile_plan(plan: Plan | Mapping[str, Any] | None) -> CompiledArtifact:
    """Compile ``plan`` against the default whitelist."""
    global _default_compiler
    if _default_compiler is None:
        _default_compiler = PlanCompiler()
    return _default_compiler.compile(plan)
