"""A small Handlebars-style template engine."""

from __future__ import annotations

import enum
import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

_TAG_RE = re.compile(r"\{\{\{(.*?)\}\}\}|\{\{(.*?)\}\}", re.DOTALL)
_ARG_RE = re.compile(r'"((?:[^"\\]|\\.)*)"|\'((?:[^\'\\]|\\.)*)\'|(\S+)')
_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?$")
_BLOCK_HELPERS = ("if", "unless", "each", "with")

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "`": "&#x60;",
    "=": "&#x3D;",
}


class RenderingError(Exception):
    """Raised when a template cannot be parsed or rendered."""


class EscapeFn(enum.Enum):
    """How variables are escaped before they are written out."""

    NONE = "none"
    HTML = "html"


def html_escape(text: str) -> str:
    """Escape characters that are significant in HTML."""
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)


class _Missing:
    pass


_MISSING = _Missing()


@dataclass
class _Text:
    text: str


@dataclass
class _Expr:
    tokens: list[str]
    escape: bool


@dataclass
class _Block:
    name: str
    args: list[str]
    body: list = field(default_factory=list)
    inverse: list = field(default_factory=list)
    in_inverse: bool = False


def _tokenize_args(text: str) -> list[str]:
    tokens = []
    for match in _ARG_RE.finditer(text):
        if match.group(1) is not None:
            tokens.append('"' + match.group(1) + '"')
        elif match.group(2) is not None:
            tokens.append('"' + match.group(2) + '"')
        else:
            tokens.append(match.group(3))
    return tokens


@dataclass
class Template:
    """A parsed template that can be rendered against JSON-like data."""

    nodes: list

    def render(
        self,
        data: Any,
        escape: EscapeFn | Callable[[str], str] | None = None,
        helpers: Mapping[str, Callable[..., Any]] | None = None,
        strict: bool = False,
    ) -> str:
        if escape is None or escape is EscapeFn.NONE:
            escape_fn: Callable[[str], str] = lambda text: text
        elif escape is EscapeFn.HTML:
            escape_fn = html_escape
        else:
            escape_fn = escape
        renderer = _Renderer(escape_fn, dict(helpers or {}), strict, data)
        out: list[str] = []
        renderer.render_nodes(self.nodes, [{"this": data}], out)
        return "".join(out)


def parse_template(source: str) -> Template:
    """Parse template text into a Template."""
    root: list = []
    stack: list[_Block] = []

    def current() -> list:
        if not stack:
            return root
        block = stack[-1]
        return block.inverse if block.in_inverse else block.body

    pending: list[Any] = []  # text nodes awaiting possible left-trim
    pos = 0
    trim_next = False
    for match in _TAG_RE.finditer(source):
        text = source[pos : match.start()]
        pos = match.end()
        triple = match.group(1) is not None
        inner = match.group(1) if triple else match.group(2)
        if trim_next:
            text = text.lstrip()
        if inner.startswith("~"):
            text = text.rstrip()
            inner = inner[1:]
        trim_next = inner.endswith("~")
        if trim_next:
            inner = inner[:-1]
        if text:
            node = _Text(text)
            current().append(node)
            pending.append(node)
        inner = inner.strip()
        if inner.startswith("!"):
            continue
        if inner.startswith("#"):
            tokens = _tokenize_args(inner[1:])
            if not tokens:
                raise RenderingError("Failed to parse template: empty block tag")
            block = _Block(tokens[0], tokens[1:])
            current().append(block)
            stack.append(block)
        elif inner.startswith("/"):
            name = inner[1:].strip()
            if not stack or stack[-1].name != name:
                raise RenderingError(
                    f"Failed to parse template: unexpected closing tag {name!r}"
                )
            stack.pop()
        elif inner in ("else", "^"):
            if not stack:
                raise RenderingError("Failed to parse template: `else` outside of a block")
            stack[-1].in_inverse = True
        else:
            tokens = _tokenize_args(inner)
            if not tokens:
                raise RenderingError("Failed to parse template: empty expression")
            current().append(_Expr(tokens, escape=not triple))
    tail = source[pos:]
    if trim_next:
        tail = tail.lstrip()
    if tail:
        current().append(_Text(tail))
    if stack:
        raise RenderingError(
            f"Failed to parse template: unclosed block {stack[-1].name!r}"
        )
    return Template(root)


def _truthy(value: Any) -> bool:
    if value is _MISSING:
        return False
    return bool(value)


def _stringify(value: Any) -> str:
    if value is None or value is _MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, list, dict)):
        return json.dumps(value)
    return str(value)


class _Renderer:
    def __init__(self, escape, helpers, strict, root):
        self.escape = escape
        self.helpers = helpers
        self.strict = strict
        self.root = root

    def resolve(self, token: str, frames: list[dict]) -> Any:
        if token.startswith('"') and token.endswith('"') and len(token) >= 2:
            return token[1:-1]
        if token in ("true", "false"):
            return token == "true"
        if token == "null":
            return None
        if _NUMBER_RE.match(token):
            return float(token) if "." in token else int(token)
        if token.startswith("@root"):
            value = self.root
            rest = token[len("@root") :].lstrip("./")
        elif token.startswith("@"):
            return frames[-1].get(token, _MISSING)
        else:
            depth = 0
            rest = token
            while rest.startswith("../"):
                depth += 1
                rest = rest[3:]
            if depth >= len(frames):
                return _MISSING
            value = frames[-1 - depth]["this"]
            if rest in ("this", "."):
                return value
            for prefix in ("this.", "this/", "./"):
                if rest.startswith(prefix):
                    rest = rest[len(prefix) :]
        for part in filter(None, re.split(r"[./]", rest)):
            if isinstance(value, Mapping) and part in value:
                value = value[part]
            elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
                value = value[int(part)]
            else:
                return _MISSING
        return value

    def resolve_strict(self, token: str, frames: list[dict]) -> Any:
        value = self.resolve(token, frames)
        if value is _MISSING and self.strict:
            raise RenderingError(f"Variable {token!r} not found in strict mode")
        return value

    def render_nodes(self, nodes: list, frames: list[dict], out: list[str]) -> None:
        for node in nodes:
            if isinstance(node, _Text):
                out.append(node.text)
            elif isinstance(node, _Expr):
                out.append(self.render_expr(node, frames))
            else:
                self.render_block(node, frames, out)

    def render_expr(self, node: _Expr, frames: list[dict]) -> str:
        name, args = node.tokens[0], node.tokens[1:]
        if name in self.helpers:
            values = [self.resolve_strict(arg, frames) for arg in args]
            values = [None if v is _MISSING else v for v in values]
            try:
                result = self.helpers[name](*values)
            except RenderingError:
                raise
            except Exception as err:
                raise RenderingError(f"Helper {name!r} failed: {err}") from err
        elif args:
            raise RenderingError(f"Helper not defined: {name!r}")
        else:
            result = self.resolve_strict(name, frames)
        text = _stringify(result)
        return self.escape(text) if node.escape else text

    def render_block(self, node: _Block, frames: list[dict], out: list[str]) -> None:
        if node.name not in _BLOCK_HELPERS:
            raise RenderingError(f"Helper not defined: {node.name!r}")
        if len(node.args) != 1:
            raise RenderingError(f"Block helper {node.name!r} takes exactly one parameter")
        arg = node.args[0]
        if node.name in ("if", "unless"):
            condition = _truthy(self.resolve(arg, frames))
            if node.name == "unless":
                condition = not condition
            self.render_nodes(node.body if condition else node.inverse, frames, out)
            return
        value = self.resolve_strict(arg, frames)
        if node.name == "with":
            if _truthy(value):
                self.render_nodes(node.body, [*frames, {"this": value}], out)
            else:
                self.render_nodes(node.inverse, frames, out)
            return
        if isinstance(value, Mapping):
            items = list(value.items())
        elif isinstance(value, list):
            items = list(enumerate(value))
        else:
            items = []
        if not items:
            self.render_nodes(node.inverse, frames, out)
            return
        last = len(items) - 1
        for position, (key, item) in enumerate(items):
            frame = {
                "this": item,
                "@index": position,
                "@first": position == 0,
                "@last": position == last,
            }
            if isinstance(value, Mapping):
                frame["@key"] = key
            self.render_nodes(node.body, [*frames, frame], out)