"""
Sandboxed Render Engine
Turns compiled UI program text into a render tree using only the fixed
component library.
"""

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict
from returns.result import Failure, Result, Success

from ..compiler import ENTRY_POINT
from ..core import get_logger
from ..registry import ComponentRegistry, default_registry
from .jsx import JSXSyntaxError, parse_program
from .library import COMPONENT_LIBRARY, Component
from .tree import RenderNode, h

logger = get_logger(__name__)


class RenderErrorKind(str, Enum):
    """Stage at which rendering failed."""

    TRANSFORM = "transform"
    EXECUTION = "execution"
    MISSING_ENTRY_POINT = "missing_entry_point"


class RenderError(BaseModel):
    """Render failure value; returned, never raised."""

    model_config = ConfigDict(frozen=True)

    kind: RenderErrorKind
    message: str


class RenderEngine:
    """
    Renders UI programs against a closed symbol table.

    The table holds exactly the element primitive ``h`` and one binding per
    whitelisted component that has an implementation. Program text is parsed
    and interpreted, never evaluated as Python, and nothing is memoized
    between calls.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        library: Mapping[str, Component] | None = None,
    ) -> None:
        registry = registry or default_registry()
        library = COMPONENT_LIBRARY if library is None else library

        self._scope: dict[str, object] = {"h": h}
        for name, impl in library.items():
            if name in registry:
                self._scope[name] = impl

    @property
    def symbols(self) -> frozenset[str]:
        """Names visible to a program."""
        return frozenset(self._scope)

    def render(self, code: str | None) -> Result[RenderNode | None, RenderError]:
        """
        Render program text.

        Args:
            code: Compiled UI program (may be empty)

        Returns:
            Success(tree) or Success(None) when there is nothing to show,
            Failure(RenderError) when the program cannot be rendered
        """
        if not code or not code.strip():
            return Success(None)

        try:
            program = parse_program(code)
        except (JSXSyntaxError, RecursionError) as e:
            return self._fail(RenderErrorKind.TRANSFORM, str(e) or "Program nesting is too deep")

        bindings = program.bind(self._scope)
        entry = bindings.get(ENTRY_POINT)
        if entry is None or not callable(entry):
            return self._fail(
                RenderErrorKind.MISSING_ENTRY_POINT,
                f"No generated UI found: the program does not define {ENTRY_POINT}",
            )

        try:
            tree = entry()
        except RecursionError:
            return self._fail(RenderErrorKind.EXECUTION, "Maximum component depth exceeded")
        except Exception as e:
            # Component implementations run on untrusted props; any failure is a render error
            return self._fail(RenderErrorKind.EXECUTION, str(e) or type(e).__name__)

        if tree is not None and not isinstance(tree, RenderNode):
            return self._fail(RenderErrorKind.EXECUTION, f"{ENTRY_POINT} did not return an element")

        return Success(tree)

    @staticmethod
    def _fail(kind: RenderErrorKind, message: str) -> Failure:
        logger.warning("render_failed", kind=kind.value, error=message[:200])
        return Failure(RenderError(kind=kind, message=message))
