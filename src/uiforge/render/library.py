"""
Component Library
The fixed implementations behind every whitelisted component name.
The planner selects and composes these; it can never change them.
"""

from collections.abc import Callable, Mapping
from typing import Any

from .tree import RenderNode, format_number, h

Component = Callable[..., RenderNode | None]

CHART_COLORS = ("#4f46e5", "#06b6d4", "#f59e0b", "#ef4444", "#10b981", "#8b5cf6")

# Sidebar icon by item label (or icon name)
ICON_MAP = {
    "Home": "home",
    "Settings": "settings",
    "User": "user",
    "Profile": "user",
    "Chart": "bar-chart",
    "Analytics": "pie-chart",
    "Docs": "file-text",
    "Billing": "credit-card",
    "Users": "users",
    "Dashboard": "layout",
}

ALERT_ICONS = {
    "info": "info",
    "success": "check-circle",
    "warning": "alert-triangle",
    "error": "x-circle",
}


def _icon(name: str, size: int = 18) -> RenderNode:
    return h("svg", {"className": f"lucide lucide-{name}", "width": size, "height": size, "aria-hidden": "true"})


def _lookup_icon(name: Any) -> str | None:
    return ICON_MAP.get(name) if isinstance(name, str) else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def Button(children=None, variant="primary", size="md", disabled=False, onClick=None, **_):
    return h(
        "button",
        {"className": f"ui-btn ui-btn--{variant} ui-btn--{size}", "disabled": disabled, "onClick": onClick},
        children,
    )


def Card(title=None, children=None, **_):
    return h(
        "div",
        {"className": "ui-card"},
        h("h3", {"className": "ui-card__title"}, title) if title else None,
        h("div", {"className": "ui-card__body"}, children),
    )


def Input(label=None, placeholder=None, type="text", disabled=False, **_):
    return h(
        "div",
        {"className": "ui-input-group"},
        h("label", {"className": "ui-input-group__label"}, label) if label else None,
        h("input", {"className": "ui-input", "type": type, "placeholder": placeholder, "disabled": disabled}),
    )


def Table(columns=None, rows=None, **_):
    columns = columns or []
    rows = rows or []
    return h(
        "div",
        {"className": "ui-table-wrapper"},
        h(
            "table",
            {"className": "ui-table"},
            h("thead", None, h("tr", None, [h("th", None, col) for col in columns])),
            h("tbody", None, [h("tr", None, [h("td", None, cell) for cell in row]) for row in rows]),
        ),
    )


def Modal(title=None, isOpen=True, children=None, **_):
    if not isOpen:
        return None
    return h(
        "div",
        {"className": "ui-modal-overlay"},
        h(
            "div",
            {"className": "ui-modal"},
            h("h3", {"className": "ui-modal__title"}, title),
            h("div", {"className": "ui-modal__body"}, children),
        ),
    )


def Sidebar(items=None, activeItem=None, **_):
    entries = []
    for item in items or []:
        if isinstance(item, Mapping):
            label, icon = item.get("label"), item.get("icon")
        else:
            label, icon = item, None

        icon_name = _lookup_icon(label) or _lookup_icon(icon) or "layout"
        active = " ui-sidebar__item--active" if label is not None and label == activeItem else ""
        entries.append(
            h(
                "div",
                {
                    "className": f"ui-sidebar__item{active}",
                    "style": {"display": "flex", "alignItems": "center", "gap": "10px"},
                },
                _icon(icon_name),
                h("span", None, label),
            )
        )
    return h("nav", {"className": "ui-sidebar"}, entries)


def Navbar(brand=None, items=None, **_):
    return h(
        "nav",
        {"className": "ui-navbar"},
        h("div", {"className": "ui-navbar__brand"}, brand),
        h("ul", {"className": "ui-navbar__links"}, [h("li", {"className": "ui-navbar__link"}, i) for i in items or []]),
    )


def Typography(variant="body", children=None, **_):
    variant = str(variant)
    tag = variant if variant.startswith("h") else "p"
    return h(tag, {"className": f"ui-typo ui-typo--{variant}"}, children)


def _chart_data(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        return []
    cleaned = []
    for d in data:
        d = d if isinstance(d, Mapping) else {}
        value = d.get("value")
        cleaned.append({"label": d.get("label") or "Unknown", "value": value if _is_number(value) else 0})
    return cleaned


def _bars(data: list[dict[str, Any]], max_val: float) -> RenderNode:
    return h(
        "div",
        {"className": "ui-chart__bars"},
        [
            h(
                "div",
                {
                    "className": "ui-chart__bar",
                    "style": {
                        "height": f"{format_number(max(d['value'] / max_val * 100, 4))}%",
                        "background": CHART_COLORS[i % len(CHART_COLORS)],
                    },
                },
                h("span", {"className": "ui-chart__bar-label"}, d["label"]),
            )
            for i, d in enumerate(data)
        ],
    )


def _line(data: list[dict[str, Any]], max_val: float) -> RenderNode:
    points = [(i * 60 + 30, 120 - d["value"] / max_val * 100) for i, d in enumerate(data)]
    return h(
        "div",
        {"className": "ui-chart__line-container"},
        h(
            "svg",
            {"width": "100%", "height": "120", "style": {"overflow": "visible"}},
            h(
                "polyline",
                {
                    "points": " ".join(f"{format_number(x)},{format_number(y)}" for x, y in points),
                    "fill": "none",
                    "stroke": "#4f46e5",
                    "strokeWidth": "2",
                },
            ),
            [h("circle", {"cx": x, "cy": y, "r": "4", "fill": "#4f46e5"}) for x, y in points],
        ),
        h(
            "div",
            {
                "style": {
                    "display": "flex",
                    "justifyContent": "flex-start",
                    "gap": "45px",
                    "paddingLeft": "15px",
                    "overflowX": "auto",
                }
            },
            [
                h(
                    "span",
                    {"style": {"fontSize": 11, "color": "#6b7280", "minWidth": "30px", "textAlign": "center"}},
                    d["label"],
                )
                for d in data
            ],
        ),
    )


def _pie(data: list[dict[str, Any]]) -> RenderNode:
    total = sum(d["value"] for d in data) or 1
    stops = []
    start = 0.0
    for i, d in enumerate(data):
        end = start + d["value"] / total * 100
        stops.append(f"{CHART_COLORS[i % len(CHART_COLORS)]} {format_number(start)}% {format_number(end)}%")
        start = end

    return h(
        "div",
        {"className": "ui-chart__pie"},
        h("div", {"className": "ui-chart__pie-visual", "style": {"background": f"conic-gradient({', '.join(stops)})"}}),
        h(
            "div",
            {"className": "ui-chart__pie-legend"},
            [
                h(
                    "div",
                    {"className": "ui-chart__pie-legend-item"},
                    h(
                        "span",
                        {
                            "className": "ui-chart__pie-legend-dot",
                            "style": {"background": CHART_COLORS[i % len(CHART_COLORS)]},
                        },
                    ),
                    f"{d['label']}: {format_number(d['value'])}",
                )
                for i, d in enumerate(data)
            ],
        ),
    )


def Chart(type="bar", title=None, data=None, **_):
    safe_data = _chart_data(data)
    max_val = max([d["value"] for d in safe_data] + [1])

    if not safe_data:
        body = h(
            "div",
            {
                "style": {
                    "padding": "20px",
                    "textAlign": "center",
                    "color": "#6b7280",
                    "background": "#f9fafb",
                    "borderRadius": "8px",
                }
            },
            "No chart data available",
        )
    elif type == "bar":
        body = _bars(safe_data, max_val)
    elif type == "line":
        body = _line(safe_data, max_val)
    elif type == "pie":
        body = _pie(safe_data)
    else:
        body = None

    return h(
        "div",
        {"className": "ui-chart"},
        h("h4", {"className": "ui-chart__title"}, title) if title else None,
        body,
    )


def Image(src="https://placehold.co/600x400", alt=None, width="100%", height="auto", **_):
    return h(
        "div",
        {
            "className": "ui-image-container",
            "style": {
                "width": width,
                "height": height,
                "display": "flex",
                "justifyContent": "center",
                "alignItems": "center",
                "overflow": "hidden",
                "borderRadius": "8px",
            },
        },
        h("img", {"src": src, "alt": alt, "style": {"width": "100%", "height": "100%", "objectFit": "cover"}}),
    )


def Alert(message=None, type="info", **_):
    return h(
        "div",
        {"className": f"ui-alert ui-alert--{type}"},
        _icon(ALERT_ICONS.get(type, "info")),
        h("span", None, message),
    )


def Flex(direction="row", gap="md", align="stretch", justify="start", wrap=False, children=None, **_):
    classes = [
        "ui-flex",
        f"ui-flex--{direction}",
        f"ui-flex--gap-{gap}",
        f"ui-flex--align-{align}",
        f"ui-flex--justify-{justify}",
        "ui-flex--wrap" if wrap else "",
    ]
    return h("div", {"className": " ".join(c for c in classes if c)}, children)


def Grid(columns=2, gap="md", children=None, **_):
    if _is_number(columns) and columns > 4:
        col_class = "ui-grid--cols-4"
    else:
        col_class = f"ui-grid--cols-{format_number(columns) if _is_number(columns) else columns}"
    return h("div", {"className": f"ui-grid {col_class} ui-grid--gap-{gap}"}, children)


def Container(children=None, **_):
    return h("div", {"className": "ui-container"}, children)


COMPONENT_LIBRARY: dict[str, Component] = {
    "Button": Button,
    "Card": Card,
    "Input": Input,
    "Table": Table,
    "Modal": Modal,
    "Sidebar": Sidebar,
    "Navbar": Navbar,
    "Typography": Typography,
    "Chart": Chart,
    "Image": Image,
    "Alert": Alert,
    "Flex": Flex,
    "Grid": Grid,
    "Container": Container,
}
