"""Escaping rules for the compiled UI program text."""

# Order matters: "&" first so later entities are not double-escaped
_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
    ("{", "&#123;"),
    ("}", "&#125;"),
    ("\n", "&#10;"),
    ("\r", "&#13;"),
)


def escape_text(value: str) -> str:
    """
    Escape markup-significant and expression-delimiter characters.

    Safe for both attribute string literals and text content.

    Examples:
        >>> escape_text('<b a="1">{x}</b>')
        '&lt;b a=&quot;1&quot;&gt;&#123;x&#125;&lt;/b&gt;'
    """
    for char, entity in _ENTITIES:
        value = value.replace(char, entity)
    return value


def escape_text_content(value: str) -> str:
    """
    Escape a text leaf for placement between tags.

    Text content is whitespace-trimmed per line when parsed back, so leading
    and trailing whitespace is encoded as numeric entities to survive intact.
    """
    escaped = escape_text(value)
    stripped = escaped.strip()
    if stripped == escaped:
        return escaped

    start = len(escaped) - len(escaped.lstrip())
    end = len(escaped.rstrip())
    if start >= end:
        return "".join(f"&#{ord(c)};" for c in escaped)

    head = "".join(f"&#{ord(c)};" for c in escaped[:start])
    tail = "".join(f"&#{ord(c)};" for c in escaped[end:])
    return head + escaped[start:end] + tail


def comment_label(value: object) -> str:
    """Render an arbitrary value as text that cannot terminate a comment."""
    label = escape_text(str(value)).replace("/", "&#47;").replace("*", "&#42;")
    return "".join(c if c.isprintable() else "?" for c in label)
