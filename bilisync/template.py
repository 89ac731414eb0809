"""A small Handlebars-style renderer that keeps path separators in templates.

Path separators written in a template survive rendering, while any that come
from the rendered data are turned into ``_`` together with every other
character that is unsafe in a file name.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from bilisync.filenamify import filenamify

_SEP = "__SEP__"

_COMMENT = re.compile(r"\{\{!--.*?--\}\}", re.S)
_TAG = re.compile(
    r"\{\{(?P<ltrim>~?)(?P<open>\{?)(?P<body>.*?)(?P<close>\}?)(?P<rtrim>~?)\}\}",
    re.S,
)
_WORD = re.compile(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'|\S+')
_INT = re.compile(r"-?\d+")
_FLOAT = re.compile(r"-?\d+\.\d+")

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "`": "&#x60;",
    "=": "&#x3D;",
}


class TemplateError(ValueError):
    """A template could not be compiled or rendered."""


@dataclass(frozen=True)
class _Literal:
    value: Any


@dataclass(frozen=True)
class _PathRef:
    raw: str

    def resolve(self, data: Any) -> Any:
        if self.raw in ("this", "."):
            return data
        current = data
        for part in re.split(r"[./]", self.raw.removeprefix("this.")):
            if isinstance(current, Mapping):
                current = current.get(part)
            elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
                current = current[int(part)]
            else:
                return None
        return current


_Operand = Union[_Literal, _PathRef]


@dataclass(frozen=True)
class _Expression:
    head: _PathRef
    params: tuple[_Operand, ...]
    escape: bool


def _unquote(word: str) -> str:
    return re.sub(r"\\(.)", r"\1", word[1:-1])


def _operand(word: str) -> _Operand:
    if word[0] in "\"'":
        return _Literal(_unquote(word))
    if _INT.fullmatch(word):
        return _Literal(int(word))
    if _FLOAT.fullmatch(word):
        return _Literal(float(word))
    if word in ("true", "false"):
        return _Literal(word == "true")
    if word in ("null", "undefined"):
        return _Literal(None)
    return _PathRef(word)


def _compile(template: str) -> list[str | _Expression]:
    template = _COMMENT.sub("", template)
    parts: list[str | _Expression] = []
    position = 0
    strip_next = False
    for match in _TAG.finditer(template):
        literal = template[position:match.start()]
        if strip_next:
            literal = literal.lstrip()
        if match["ltrim"]:
            literal = literal.rstrip()
        _check_literal(literal)
        parts.append(literal)
        position = match.end()
        strip_next = bool(match["rtrim"])
        if bool(match["open"]) != bool(match["close"]):
            raise TemplateError(f"mismatched braces in {match.group(0)!r}")
        body = match["body"].strip()
        if body.startswith("!"):
            continue
        if not body:
            raise TemplateError("empty expression")
        if body[0] in "#/^>" or body.split()[0] == "else":
            raise TemplateError(f"unsupported expression {body!r}")
        words = _WORD.findall(body)
        head = _operand(words[0])
        if not isinstance(head, _PathRef):
            raise TemplateError(f"expression must start with a name: {body!r}")
        parts.append(
            _Expression(head, tuple(_operand(w) for w in words[1:]), escape=not match["open"])
        )
    rest = template[position:]
    if strip_next:
        rest = rest.lstrip()
    _check_literal(rest)
    parts.append(rest)
    return [part for part in parts if part != ""]


def _check_literal(text: str) -> None:
    if "{{" in text:
        raise TemplateError(f"unclosed expression near {text[text.index('{{'):][:20]!r}")


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(value, ensure_ascii=False)


def _escape(text: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in text)


def truncate(text: str, length: int) -> str:
    """Keep at most ``length`` characters of ``text``."""
    if not isinstance(text, str):
        raise TypeError(f"truncate expects a string, got {text!r}")
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise TypeError(f"truncate expects a non-negative length, got {length!r}")
    return text[:length] if len(text) > length else text


class PathSafeTemplate:
    """Named templates whose own path separators survive file-name sanitising."""

    def __init__(self, helpers: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._helpers: dict[str, Callable[..., Any]] = dict(helpers or {})
        self._templates: dict[str, list[str | _Expression]] = {}

    def register(self, name: str, template: str) -> None:
        """Compile ``template`` and store it under ``name``."""
        self._templates[name] = _compile(template.replace(os.sep, _SEP))

    def render(self, name: str, data: Mapping[str, Any]) -> str:
        """Render a registered template into a file-system-safe path."""
        try:
            parts = self._templates[name]
        except KeyError:
            raise TemplateError(f"template not found: {name}") from None
        rendered = "".join(
            part if isinstance(part, str) else self._evaluate(part, data) for part in parts
        )
        return filenamify(rendered).replace(_SEP, os.sep)

    def _evaluate(self, expression: _Expression, data: Any) -> str:
        helper = self._helpers.get(expression.head.raw)
        if helper is not None:
            args = [
                p.resolve(data) if isinstance(p, _PathRef) else p.value
                for p in expression.params
            ]
            try:
                value = helper(*args)
            except (TypeError, ValueError) as exc:
                raise TemplateError(
                    f"helper {expression.head.raw!r} failed: {exc}"
                ) from exc
        elif expression.params:
            raise TemplateError(f"helper not defined: {expression.head.raw}")
        else:
            value = expression.head.resolve(data)
        text = _to_text(value)
        return _escape(text) if expression.escape else text


def default_template(video_name: str, page_name: str) -> PathSafeTemplate:
    """Templates for video and page names, with the ``truncate`` helper."""
    template = PathSafeTemplate(helpers={"truncate": truncate})
    template.register("video", video_name)
    template.register("page", page_name)
    return template