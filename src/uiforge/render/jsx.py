"""
JSX-subset parser and interpreter.

Parses generated UI programs into a small syntax tree and evaluates it against
a caller-supplied symbol table. Elements are created through the table's
``h`` binding. There is no path from program text to Python
code: identifiers resolve only through the symbol table and attribute or
child expressions are restricted to JSON literals.

Supported grammar::

    program   := (import-line | "export" ["default"] | function)*
    function  := "function" Name "(" ")" "{" "return" expr [";"] "}"
    expr      := "(" expr ")" | "null" | element
    element   := "<" Name attr* ("/>" | ">" child* "</" Name ">")
    attr      := name | name "=" (string | "{" json "}")
    child     := element | text | "{" [json] "}"

Line (``//``) and block (``/* */``) comments are allowed wherever whitespace is.
"""

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from html.entities import html5
from typing import Any, NoReturn, Union

_IDENT = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_ATTR_NAME = re.compile(r"[A-Za-z_$][A-Za-z0-9_$-]*")
_ENTITY = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")

_json_decoder = json.JSONDecoder()


class JSXSyntaxError(Exception):
    """Program text does not match the supported grammar."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(f"{message} ({line}:{column})" if line else message)
        self.line = line
        self.column = column


class JSXRuntimeError(Exception):
    """Program failed while being evaluated."""


# ---------------------------------------------------------------------------
# Syntax tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Element:
    name: str
    attrs: tuple[tuple[str, Any], ...]
    children: tuple["Node", ...]


Node = Union[Element, Literal]


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    body: Node


@dataclass(frozen=True)
class Program:
    functions: tuple[FunctionDecl, ...]

    def bind(self, scope: Mapping[str, Any]) -> dict[str, Any]:
        """
        Execute top-level declarations.

        Returns:
            The symbol table extended with one binding per declared function
        """
        env = dict(scope)
        for fn in self.functions:
            env[fn.name] = _Closure(fn, env)
        return env


class _Closure:
    """A declared function bound to its defining environment."""

    def __init__(self, decl: FunctionDecl, env: dict[str, Any]) -> None:
        self.decl = decl
        self.env = env

    def __call__(self, **_props: Any) -> Any:
        return evaluate(self.decl.body, self.env)

    def __repr__(self) -> str:
        return f"<function {self.decl.name}>"


# ---------------------------------------------------------------------------
# Entities and text
# ---------------------------------------------------------------------------


def _entity(match: re.Match) -> str:
    ref = match.group(1)
    if ref[0] == "#":
        try:
            code = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:])
        except ValueError:
            # digit run longer than int() accepts
            return "\ufffd"
        return chr(code) if code <= 0x10FFFF else "\ufffd"
    return html5.get(f"{ref};", match.group(0))


def decode_entities(text: str) -> str:
    """Decode character references (named, decimal and hex)."""
    if "&" not in text:
        return text
    return _ENTITY.sub(_entity, text)


def clean_text(raw: str) -> str:
    """
    Apply text whitespace rules to a raw text run.

    Each line is trimmed, blank lines are dropped and the rest are joined with a
    single space. Character references are decoded afterwards, so encoded
    whitespace survives.
    """
    lines = [line.strip() for line in raw.split("\n")]
    return decode_entities(" ".join(line for line in lines if line))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class JSXParser:
    """Recursive-descent parser over a single program source."""

    def __init__(self, source: str) -> None:
        self.src = source
        self.pos = 0

    def parse(self) -> Program:
        functions = []
        while True:
            self._skip_trivia()
            if self._eof():
                break
            if self._keyword("import"):
                self._skip_line()
            elif self._keyword("export"):
                self.pos += len("export")
                self._skip_trivia()
                if self._keyword("default"):
                    self.pos += len("default")
            elif self._keyword("function"):
                functions.append(self._function())
            else:
                self._fail("Unexpected token")
        return Program(tuple(functions))

    # -- statements ---------------------------------------------------------

    def _function(self) -> FunctionDecl:
        self.pos += len("function")
        self._skip_trivia()
        name = self._identifier()
        self._skip_trivia()
        self._expect("(")
        self._skip_trivia()
        self._expect(")")
        self._skip_trivia()
        self._expect("{")
        self._skip_trivia()
        if not self._keyword("return"):
            self._fail("Expected return statement")
        self.pos += len("return")
        self._skip_trivia()
        body = self._expression()
        self._skip_trivia()
        if self._peek() == ";":
            self.pos += 1
        self._skip_trivia()
        self._expect("}")
        return FunctionDecl(name=name, body=body)

    def _expression(self) -> Node:
        char = self._peek()
        if char == "(":
            self.pos += 1
            self._skip_trivia()
            node = self._expression()
            self._skip_trivia()
            self._expect(")")
            return node
        if self._keyword("null"):
            self.pos += len("null")
            return Literal(None)
        if char == "<":
            return self._element()
        self._fail("Unexpected token")

    # -- elements -----------------------------------------------------------

    def _element(self) -> Element:
        self._expect("<")
        name = self._identifier()
        attrs = []

        while True:
            self._skip_trivia()
            if self.src.startswith("/>", self.pos):
                self.pos += 2
                return Element(name=name, attrs=tuple(attrs), children=())
            if self._peek() == ">":
                self.pos += 1
                break
            attrs.append(self._attribute())

        children = self._children()
        self._expect("</")
        closing = self._identifier()
        if closing != name:
            self._fail(f"Expected corresponding closing tag for <{name}>")
        self._skip_trivia()
        self._expect(">")
        return Element(name=name, attrs=tuple(attrs), children=tuple(children))

    def _attribute(self) -> tuple[str, Any]:
        match = _ATTR_NAME.match(self.src, self.pos)
        if not match:
            self._fail("Expected attribute name")
        name = match.group(0)
        self.pos = match.end()
        self._skip_trivia()

        if self._peek() != "=":
            return name, True

        self.pos += 1
        self._skip_trivia()
        quote = self._peek()
        if quote in ('"', "'"):
            end = self.src.find(quote, self.pos + 1)
            if end < 0:
                self._fail("Unterminated string constant")
            value = decode_entities(self.src[self.pos + 1 : end])
            self.pos = end + 1
            return name, value
        if quote == "{":
            self.pos += 1
            self._skip_trivia()
            value = self._json_literal()
            self._skip_trivia()
            self._expect("}")
            return name, value

        self._fail("JSX value should be either an expression or a quoted text")

    def _children(self) -> list[Node]:
        children: list[Node] = []
        while True:
            if self._eof():
                self._fail("Unterminated JSX contents")
            if self.src.startswith("</", self.pos):
                return children

            char = self._peek()
            if char == "<":
                children.append(self._element())
            elif char == "{":
                self.pos += 1
                self._skip_trivia()
                if self._peek() != "}":
                    children.append(Literal(self._json_literal()))
                    self._skip_trivia()
                self._expect("}")
            elif char == "}":
                self._fail("Unexpected token '}'")
            else:
                start = self.pos
                while not self._eof() and self._peek() not in "<{}":
                    self.pos += 1
                text = clean_text(self.src[start : self.pos])
                if text:
                    children.append(Literal(text))

    def _json_literal(self) -> Any:
        try:
            value, end = _json_decoder.raw_decode(self.src, self.pos)
        except ValueError:
            # JSONDecodeError, or an integer literal past the int digit limit
            self._fail("Only literal values are allowed in expressions")
        self.pos = end
        return value

    # -- scanning -----------------------------------------------------------

    def _eof(self) -> bool:
        return self.pos >= len(self.src)

    def _peek(self) -> str:
        return self.src[self.pos] if self.pos < len(self.src) else ""

    def _keyword(self, word: str) -> bool:
        if not self.src.startswith(word, self.pos):
            return False
        end = self.pos + len(word)
        return end >= len(self.src) or not (self.src[end].isalnum() or self.src[end] in "_$")

    def _identifier(self) -> str:
        match = _IDENT.match(self.src, self.pos)
        if not match:
            self._fail("Expected identifier")
        self.pos = match.end()
        return match.group(0)

    def _expect(self, token: str) -> None:
        if not self.src.startswith(token, self.pos):
            self._fail(f"Expected {token!r}")
        self.pos += len(token)

    def _skip_line(self) -> None:
        end = self.src.find("\n", self.pos)
        self.pos = len(self.src) if end < 0 else end + 1

    def _skip_trivia(self) -> None:
        while not self._eof():
            char = self._peek()
            if char.isspace():
                self.pos += 1
            elif self.src.startswith("//", self.pos):
                self._skip_line()
            elif self.src.startswith("/*", self.pos):
                end = self.src.find("*/", self.pos + 2)
                if end < 0:
                    self._fail("Unterminated comment")
                self.pos = end + 2
            else:
                return

    def _fail(self, message: str) -> NoReturn:
        line = self.src.count("\n", 0, self.pos) + 1
        column = self.pos - (self.src.rfind("\n", 0, self.pos) + 1) + 1
        raise JSXSyntaxError(message, line, column)


def parse_program(source: str) -> Program:
    """Parse program text; raises JSXSyntaxError."""
    return JSXParser(source).parse()


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------


def evaluate(node: Node, env: Mapping[str, Any]) -> Any:
    """Evaluate a syntax node against ``env``."""
    if isinstance(node, Literal):
        return node.value

    if not node.name[0].isupper():
        raise JSXRuntimeError(f"<{node.name}> is not an available component")
    if node.name not in env:
        raise JSXRuntimeError(f"{node.name} is not defined")

    target: Callable[..., Any] = env[node.name]
    if not callable(target):
        raise JSXRuntimeError(f"{node.name} is not a component")

    create = env.get("h")
    if create is None:
        raise JSXRuntimeError("h is not defined")

    props = dict(node.attrs)
    children = [evaluate(child, env) for child in node.children]
    return create(target, props, *children)
