"""HTML serialization of render trees for previews."""

import re
from html import escape
from typing import Any

from .tree import RenderNode, format_number

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

ATTRIBUTE_ALIASES = {"className": "class", "htmlFor": "for", "strokeWidth": "stroke-width"}

# CSS properties that take bare numbers
UNITLESS = frozenset({"opacity", "zIndex", "fontWeight", "lineHeight", "flex", "flexGrow", "flexShrink", "order"})

_UPPER = re.compile(r"([A-Z])")
_ATTR_SAFE = re.compile(r"^[A-Za-z_:][A-Za-z0-9_:.-]*$")


def _kebab(name: str) -> str:
    return _UPPER.sub(lambda m: "-" + m.group(1).lower(), name)


def style_to_css(style: dict[str, Any]) -> str:
    """``{"fontSize": 11, "textAlign": "center"}`` -> ``font-size:11px;text-align:center``"""
    rules = []
    for key, value in style.items():
        if value is None or isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            value = format_number(value) if value == 0 or key in UNITLESS else f"{format_number(value)}px"
        rules.append(f"{_kebab(key)}:{value}")
    return ";".join(rules)


def _attributes(props: dict[str, Any]) -> str:
    parts = []
    for key, value in props.items():
        if value is None or value is False:
            continue
        if key.startswith("on") and key[2:3].isupper():
            continue  # no event handlers in static output
        name = ATTRIBUTE_ALIASES.get(key, key)
        if not _ATTR_SAFE.match(name):
            continue

        if key == "style" and isinstance(value, dict):
            value = style_to_css(value)
        elif value is True:
            parts.append(f" {name}")
            continue
        elif isinstance(value, (int, float)):
            value = format_number(value)
        elif not isinstance(value, str):
            continue
        parts.append(f' {name}="{escape(value, quote=True)}"')
    return "".join(parts)


def to_html(tree: RenderNode | str | None) -> str:
    """
    Serialize a render tree to HTML.

    All text and attribute values are escaped; event handler props are dropped.
    """
    if tree is None:
        return ""
    if isinstance(tree, str):
        return escape(tree, quote=False)

    attrs = _attributes(tree.props)
    if tree.tag in VOID_ELEMENTS:
        return f"<{tree.tag}{attrs}>"

    inner = "".join(to_html(child) for child in tree.children)
    return f"<{tree.tag}{attrs}>{inner}</{tree.tag}>"
