"""Logic-less ``{{mustache}}`` rendering for installer sources and license texts.

Supported tags:

* ``{{name}}`` substitutes a value with XML/HTML escaping,
* ``{{{name}}}`` and ``{{& name}}`` substitute the raw value,
* ``{{#name}}...{{/name}}`` renders a section once for a truthy scalar, once
  per item of a list (each item pushed onto the context stack), or once with a
  mapping pushed onto the stack,
* ``{{^name}}...{{/name}}`` renders when the value is missing or falsy,
* ``{{! comment}}`` renders nothing.

Section and comment tags alone on a line remove the whole line from the output.
Names may contain hyphens and dots; a dotted name walks nested mappings and
``.`` refers to the current context item. Missing names render as empty text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence, Union
import html
import re


_TAG_PATTERN = re.compile(
    r"\{\{\{\s*(?P<raw>[^{}]+?)\s*\}\}\}"
    r"|\{\{\s*(?P<sigil>[#^/!&]?)\s*(?P<name>.*?)\s*\}\}",
    re.DOTALL,
)
_STANDALONE_SIGILS = {"#", "^", "/", "!"}


class TemplateError(ValueError):
    """Raised when a template cannot be parsed or rendered."""


@dataclass(slots=True)
class _Variable:
    name: str
    escape: bool


@dataclass(slots=True)
class _Section:
    name: str
    inverted: bool
    children: List["_Node"] = field(default_factory=list)


_Node = Union[str, _Variable, _Section]


def _standalone_span(source: str, start: int, end: int, position: int) -> tuple[int, int] | None:
    line_start = source.rfind("\n", 0, start) + 1
    if line_start < position:
        return None
    newline = source.find("\n", end)
    line_end = len(source) if newline == -1 else newline + 1
    before = source[line_start:start]
    after = source[end:line_end]
    if before.strip() or after.strip():
        return None
    return line_start, line_end


def _parse(source: str) -> List[_Node]:
    root: List[_Node] = []
    open_sections: List[_Section] = []
    children = root
    position = 0

    for match in _TAG_PATTERN.finditer(source):
        start, end = match.span()
        raw = match.group("raw")
        sigil = "" if raw is not None else match.group("sigil")
        name = (raw if raw is not None else match.group("name")).strip()

        if sigil in _STANDALONE_SIGILS:
            span = _standalone_span(source, start, end, position)
            if span is not None:
                start, end = span

        if start > position:
            children.append(source[position:start])
        position = end

        if sigil == "!":
            continue
        if not name:
            raise TemplateError(f"Empty tag at offset {match.start()}")

        if sigil in ("#", "^"):
            section = _Section(name=name, inverted=sigil == "^")
            children.append(section)
            open_sections.append(section)
            children = section.children
        elif sigil == "/":
            if not open_sections:
                raise TemplateError(f"Closing tag '{name}' has no matching section")
            current = open_sections.pop()
            if current.name != name:
                raise TemplateError(
                    f"Closing tag '{name}' does not match open section '{current.name}'"
                )
            children = open_sections[-1].children if open_sections else root
        else:
            children.append(_Variable(name=name, escape=raw is None and sigil != "&"))

    if open_sections:
        raise TemplateError(f"Section '{open_sections[-1].name}' is never closed")
    if position < len(source):
        children.append(source[position:])
    return root


def _lookup(stack: Sequence[Any], name: str) -> Any:
    if name == ".":
        return stack[-1] if stack else None

    head, *rest = name.split(".")
    for frame in reversed(stack):
        if isinstance(frame, Mapping) and head in frame:
            current = frame[head]
            break
    else:
        return None

    for part in rest:
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _is_truthy(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) > 0
    return True


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _render_nodes(nodes: Sequence[_Node], stack: List[Any], out: List[str]) -> None:
    for node in nodes:
        if isinstance(node, str):
            out.append(node)
            continue

        value = _lookup(stack, node.name)
        if isinstance(node, _Variable):
            text = _stringify(value)
            out.append(html.escape(text, quote=True) if node.escape else text)
            continue

        truthy = _is_truthy(value)
        if node.inverted:
            if not truthy:
                _render_nodes(node.children, stack, out)
        elif not truthy:
            continue
        elif isinstance(value, Mapping):
            _render_nodes(node.children, [*stack, value], out)
        elif isinstance(value, (list, tuple)):
            for item in value:
                _render_nodes(node.children, [*stack, item], out)
        else:
            _render_nodes(node.children, stack, out)


@dataclass(slots=True)
class MustacheTemplate:
    """A parsed template that can be rendered against many contexts."""

    source: str
    _nodes: List[_Node] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._nodes = _parse(self.source)

    def render(self, context: Mapping[str, Any]) -> str:
        if not isinstance(context, Mapping):
            raise TemplateError("Template context must be a mapping")
        out: List[str] = []
        _render_nodes(self._nodes, [context], out)
        return "".join(out)


def render_template(source: str, context: Mapping[str, Any]) -> str:
    """Parse ``source`` and render it with ``context`` in one step."""

    return MustacheTemplate(source).render(context)


__all__ = ["MustacheTemplate", "TemplateError", "render_template"]
