"""Render tree and the base element primitive."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

Child = Union["RenderNode", str]


@dataclass(frozen=True)
class RenderNode:
    """An element in the rendered UI tree."""

    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    children: tuple[Child, ...] = ()

    def find_all(self, tag: str) -> list["RenderNode"]:
        """Every descendant (including self) with the given tag, in document order."""
        found = [self] if self.tag == tag else []
        for child in self.children:
            if isinstance(child, RenderNode):
                found.extend(child.find_all(tag))
        return found

    def text(self) -> str:
        """Concatenated text content of this subtree."""
        return "".join(c if isinstance(c, str) else c.text() for c in self.children)

    @property
    def class_name(self) -> str:
        return self.props.get("className") or ""


def format_number(value: int | float) -> str:
    """Render a number the way it would appear as UI text (``10.0`` -> ``10``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_children(children: Any) -> tuple[Child, ...]:
    """
    Flatten child values into render children.

    Nested sequences are flattened, None and booleans render nothing, numbers
    become text. Mappings and other objects are not valid children.
    """
    out: list[Child] = []
    _collect(children, out)
    return tuple(out)


def _collect(value: Any, out: list[Child]) -> None:
    if value is None or isinstance(value, bool):
        return
    if isinstance(value, str):
        if value:
            out.append(value)
    elif isinstance(value, RenderNode):
        out.append(value)
    elif isinstance(value, (int, float)):
        out.append(format_number(value))
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect(item, out)
    else:
        raise TypeError(f"Objects are not valid as a UI child (found: {type(value).__name__})")


def h(tag: str | Callable[..., Any], props: dict[str, Any] | None = None, *children: Any) -> Any:
    """
    Create an element.

    A string ``tag`` builds a RenderNode directly; a callable ``tag`` is a
    component and is invoked with its props, content children passed as the
    ``children`` prop (a single child unwrapped).
    """
    props = dict(props or {})

    if callable(tag):
        if children:
            props["children"] = children[0] if len(children) == 1 else list(children)
        return tag(**props)

    if children:
        content = children
    else:
        content = props.get("children")
    props.pop("children", None)
    return RenderNode(tag=tag, props=props, children=normalize_children(content))
