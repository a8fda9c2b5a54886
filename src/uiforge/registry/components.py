"""
Component Registry
The single source of truth for every component the planner may use.
A component that is not registered here does not exist to the pipeline.
"""

from collections.abc import Iterable, Iterator
from functools import lru_cache

from .models import ComponentSpec, PropKind, PropSpec


GAP_VALUES = ("sm", "md", "lg")


DEFAULT_COMPONENTS: tuple[ComponentSpec, ...] = (
    ComponentSpec(
        name="Button",
        description="A clickable button",
        props={
            "children": PropSpec(kind=PropKind.STRING, required=True, description="Button label text"),
            "variant": PropSpec(
                kind=PropKind.ENUM, values=("primary", "secondary", "outline", "danger"), default="primary"
            ),
            "size": PropSpec(kind=PropKind.ENUM, values=("sm", "md", "lg"), default="md"),
            "disabled": PropSpec(kind=PropKind.BOOLEAN, default=False),
            "onClick": PropSpec(
                kind=PropKind.STRING, description="What happens when clicked (just a description)"
            ),
        },
    ),
    ComponentSpec(
        name="Card",
        description="A container with a border and padding, used to group related content",
        props={
            "title": PropSpec(kind=PropKind.STRING, description="Card header title"),
            "children": PropSpec(kind=PropKind.NODE, required=True, description="Content inside the card"),
        },
    ),
    ComponentSpec(
        name="Input",
        description="A text input field",
        props={
            "label": PropSpec(kind=PropKind.STRING, description="Label above the input"),
            "placeholder": PropSpec(kind=PropKind.STRING, description="Placeholder text"),
            "type": PropSpec(
                kind=PropKind.ENUM, values=("text", "email", "password", "number", "search"), default="text"
            ),
            "disabled": PropSpec(kind=PropKind.BOOLEAN, default=False),
        },
    ),
    ComponentSpec(
        name="Table",
        description="A data table that shows rows and columns",
        props={
            "columns": PropSpec(
                kind=PropKind.ARRAY, items="string", required=True, description="Column header names"
            ),
            "rows": PropSpec(
                kind=PropKind.ARRAY, items="array", required=True, description="2D array of cell values"
            ),
        },
    ),
    ComponentSpec(
        name="Modal",
        description="A popup dialog/overlay",
        props={
            "title": PropSpec(kind=PropKind.STRING, required=True, description="Modal title"),
            "isOpen": PropSpec(kind=PropKind.BOOLEAN, default=True),
            "children": PropSpec(kind=PropKind.NODE, required=True, description="Content inside the modal"),
        },
    ),
    ComponentSpec(
        name="Sidebar",
        description="A vertical navigation panel on the left side",
        props={
            "items": PropSpec(
                kind=PropKind.ARRAY, items="object", required=True, description="Array of {label, icon} objects"
            ),
            "activeItem": PropSpec(kind=PropKind.STRING, description="Currently active item label"),
        },
    ),
    ComponentSpec(
        name="Navbar",
        description="A horizontal navigation bar at the top",
        props={
            "brand": PropSpec(kind=PropKind.STRING, description="Brand/logo text"),
            "items": PropSpec(kind=PropKind.ARRAY, items="string", description="Navigation link labels"),
        },
    ),
    ComponentSpec(
        name="Typography",
        description="Text element for headings and body text",
        props={
            "variant": PropSpec(
                kind=PropKind.ENUM, values=("h1", "h2", "h3", "h4", "body", "caption"), default="body"
            ),
            "children": PropSpec(kind=PropKind.STRING, required=True, description="The text content"),
        },
    ),
    ComponentSpec(
        name="Chart",
        description="A simple chart/graph (uses mocked data)",
        props={
            "type": PropSpec(kind=PropKind.ENUM, values=("bar", "line", "pie"), default="bar"),
            "title": PropSpec(kind=PropKind.STRING, description="Chart title"),
            "data": PropSpec(
                kind=PropKind.ARRAY,
                items="object",
                description=(
                    "Array of objects. Each object MUST have 'label' (string) and 'value' (number). "
                    "Example: [{'label': 'A', 'value': 10}]"
                ),
            ),
        },
    ),
    ComponentSpec(
        name="Image",
        description="An image placeholder",
        props={
            "src": PropSpec(
                kind=PropKind.STRING,
                default="https://placehold.co/600x400",
                description="Image URL (e.g. 'https://placehold.co/600x400')",
            ),
            "alt": PropSpec(kind=PropKind.STRING, required=True, description="Alt text for the image"),
            "width": PropSpec(kind=PropKind.STRING, default="100%", description="Width of the image"),
            "height": PropSpec(kind=PropKind.STRING, default="auto", description="Height of the image"),
        },
    ),
    ComponentSpec(
        name="Alert",
        description="A notification/alert banner",
        props={
            "message": PropSpec(kind=PropKind.STRING, required=True, description="Alert message"),
            "type": PropSpec(
                kind=PropKind.ENUM, values=("info", "success", "warning", "error"), default="info"
            ),
        },
    ),
    ComponentSpec(
        name="Flex",
        description="A flexbox layout container to arrange children horizontally or vertically",
        props={
            "direction": PropSpec(kind=PropKind.ENUM, values=("row", "column"), default="row"),
            "gap": PropSpec(kind=PropKind.ENUM, values=GAP_VALUES, default="md"),
            "align": PropSpec(
                kind=PropKind.ENUM, values=("start", "center", "end", "stretch"), default="stretch"
            ),
            "justify": PropSpec(
                kind=PropKind.ENUM, values=("start", "center", "end", "between", "around"), default="start"
            ),
            "wrap": PropSpec(kind=PropKind.BOOLEAN, default=False),
            "children": PropSpec(kind=PropKind.NODE, required=True),
        },
    ),
    ComponentSpec(
        name="Grid",
        description="A CSS grid layout container",
        props={
            "columns": PropSpec(kind=PropKind.NUMBER, default=2, description="Number of columns"),
            "gap": PropSpec(kind=PropKind.ENUM, values=GAP_VALUES, default="md"),
            "children": PropSpec(kind=PropKind.NODE, required=True),
        },
    ),
    ComponentSpec(
        name="Container",
        description="A centered content wrapper with max-width",
        props={
            "children": PropSpec(kind=PropKind.NODE, required=True),
        },
    ),
)


def _format_default(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ComponentRegistry:
    """Read-only whitelist of component specs, kept in insertion order."""

    def __init__(self, specs: Iterable[ComponentSpec]) -> None:
        self._specs: dict[str, ComponentSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"Duplicate component: {spec.name}")
            self._specs[spec.name] = spec
        self._names = frozenset(self._specs)

    def get(self, name: object) -> ComponentSpec | None:
        """Look up a component spec; non-string names are never registered."""
        if not isinstance(name, str):
            return None
        return self._specs.get(name)

    def names(self) -> frozenset[str]:
        """Set of registered component names."""
        return self._names

    def allowed(self) -> tuple[str, ...]:
        """Registered names in insertion order."""
        return tuple(self._specs)

    def describe_for_prompt(self) -> str:
        """
        Render every component and prop contract as planner documentation.

        The output is stable for a given registry (insertion order), since it
        is embedded verbatim in the oracle instructions on every call.
        """
        lines = ["AVAILABLE COMPONENTS (you can ONLY use these):", ""]

        for spec in self._specs.values():
            lines.append(f"<{spec.name}>: {spec.description}")
            lines.append("  Props:")
            for prop_name, prop in spec.props.items():
                if prop.kind == PropKind.ENUM:
                    line = f"    - {prop_name} (one of: {', '.join(prop.values or ())})"
                else:
                    line = f"    - {prop_name} ({prop.kind.value})"
                if prop.required:
                    line += " [REQUIRED]"
                if prop.has_default:
                    line += f" [default: {_format_default(prop.default)}]"
                if prop.description:
                    line += f" - {prop.description}"
                lines.append(line)
            lines.append("")

        return "\n".join(lines)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._specs

    def __iter__(self) -> Iterator[ComponentSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


@lru_cache
def default_registry() -> ComponentRegistry:
    """Process-wide registry of the built-in component library."""
    return ComponentRegistry(DEFAULT_COMPONENTS)
