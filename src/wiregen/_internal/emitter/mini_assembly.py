from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_PATH_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*$")
_FOR_PATTERN = re.compile(r"^for\s+(?P<target>[A-Za-z_][A-Za-z0-9_]*)\s+in\s+(?P<source>\S+)$")


@dataclass(frozen=True, slots=True)
class _TextToken:
    value: str


@dataclass(frozen=True, slots=True)
class _VariableToken:
    expression: str


@dataclass(frozen=True, slots=True)
class _BlockToken:
    expression: str


_Token = _TextToken | _VariableToken | _BlockToken


@dataclass(frozen=True, slots=True)
class _Condition:
    path: tuple[str, ...]
    negated: bool


@dataclass(frozen=True, slots=True)
class _TextNode:
    value: str


@dataclass(frozen=True, slots=True)
class _VariableNode:
    path: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class _IfNode:
    condition: _Condition
    truthy_nodes: tuple[_Node, ...]
    falsy_nodes: tuple[_Node, ...]


@dataclass(frozen=True, slots=True)
class _ForNode:
    target: str
    source: tuple[str, ...]
    body: tuple[_Node, ...]


_Node = _TextNode | _VariableNode | _IfNode | _ForNode


class Environment:
    """Compile assembly fragments used to lay out generated adapter modules.

    Supported syntax: ``{{ name }}`` and ``{{ item.attribute }}`` interpolation,
    ``{% if [not] path %}...{% else %}...{% endif %}`` and
    ``{% for item in path %}...{% endfor %}``. A block tag alone on its line
    consumes the whole line.
    """

    def from_string(self, text: str) -> AssemblySnippet:
        """Compile fragment text into a renderable snippet.

        Args:
            text: Fragment source text to compile.

        """
        parser = _Parser(tokens=_tokenize(text))
        return AssemblySnippet(nodes=parser.parse())


class AssemblySnippet:
    """Compiled assembly fragment."""

    def __init__(self, *, nodes: tuple[_Node, ...]) -> None:
        self._nodes = nodes

    def render(self, **context: object) -> str:
        return _render_nodes(nodes=self._nodes, context=context)


class _Parser:
    def __init__(self, *, tokens: tuple[_Token, ...]) -> None:
        self._tokens = tokens
        self._position = 0

    def parse(self) -> tuple[_Node, ...]:
        nodes, stop_tag = self._parse_nodes(stop_tags=frozenset())
        if stop_tag is not None:
            msg = f"Unexpected block tag '{stop_tag}'."
            raise ValueError(msg)
        return tuple(nodes)

    def _parse_nodes(self, *, stop_tags: frozenset[str]) -> tuple[list[_Node], str | None]:
        nodes: list[_Node] = []

        while self._position < len(self._tokens):
            token = self._tokens[self._position]
            self._position += 1

            if isinstance(token, _TextToken):
                nodes.append(_TextNode(value=token.value))
                continue

            if isinstance(token, _VariableToken):
                nodes.append(_VariableNode(path=_parse_path(token.expression, kind="variable")))
                continue

            tag = token.expression
            if tag in stop_tags:
                return nodes, tag
            if tag in {"else", "endif", "endfor"}:
                msg = f"Unexpected block tag '{tag}'."
                raise ValueError(msg)
            if tag.startswith("if "):
                nodes.append(self._parse_if(expression=tag[3:].strip()))
                continue
            if tag.startswith("for "):
                nodes.append(self._parse_for(expression=tag))
                continue

            msg = f"Unsupported assembly tag '{tag}'."
            raise ValueError(msg)

        return nodes, None

    def _parse_if(self, *, expression: str) -> _IfNode:
        negated = expression.startswith("not ")
        path = _parse_path(expression[4:].strip() if negated else expression, kind="if condition")
        truthy_nodes, stop_tag = self._parse_nodes(stop_tags=frozenset({"else", "endif"}))
        falsy_nodes: list[_Node] = []
        if stop_tag == "else":
            falsy_nodes, stop_tag = self._parse_nodes(stop_tags=frozenset({"endif"}))
        if stop_tag != "endif":
            msg = "Unclosed if block: missing endif."
            raise ValueError(msg)
        return _IfNode(
            condition=_Condition(path=path, negated=negated),
            truthy_nodes=tuple(truthy_nodes),
            falsy_nodes=tuple(falsy_nodes),
        )

    def _parse_for(self, *, expression: str) -> _ForNode:
        match = _FOR_PATTERN.fullmatch(expression)
        if match is None:
            msg = f"Unsupported for loop '{expression}'."
            raise ValueError(msg)
        source = _parse_path(match.group("source"), kind="for source")
        body, stop_tag = self._parse_nodes(stop_tags=frozenset({"endfor"}))
        if stop_tag != "endfor":
            msg = "Unclosed for block: missing endfor."
            raise ValueError(msg)
        return _ForNode(target=match.group("target"), source=source, body=tuple(body))


def _tokenize(text: str) -> tuple[_Token, ...]:
    tokens: list[_Token] = []
    cursor = 0
    at_line_start = True

    while cursor < len(text):
        variable_start = text.find("{{", cursor)
        block_start = text.find("{%", cursor)
        starts = [start for start in (variable_start, block_start) if start != -1]
        if not starts:
            tokens.append(_TextToken(value=text[cursor:]))
            break

        tag_start = min(starts)
        is_block = tag_start == block_start
        closing = "%}" if is_block else "}}"
        end = text.find(closing, tag_start + 2)
        if end == -1:
            msg = f"Unclosed {'block' if is_block else 'variable'} tag."
            raise ValueError(msg)
        expression = text[tag_start + 2 : end].strip()
        if not expression:
            msg = f"{'Block' if is_block else 'Variable'} tag cannot be empty."
            raise ValueError(msg)

        leading = text[cursor:tag_start]
        cursor = end + 2
        line_start = leading.rfind("\n") + 1
        starts_line = (line_start > 0 or at_line_start) and not leading[line_start:].strip()
        at_line_start = False
        if is_block and starts_line:
            line_end = text.find("\n", cursor)
            rest_of_line = text[cursor:] if line_end == -1 else text[cursor:line_end]
            if not rest_of_line.strip():
                leading = leading[:line_start]
                cursor = len(text) if line_end == -1 else line_end + 1
                at_line_start = True

        if leading:
            tokens.append(_TextToken(value=leading))
        tokens.append(_BlockToken(expression) if is_block else _VariableToken(expression))

    return tuple(tokens)


def _parse_path(expression: str, *, kind: str) -> tuple[str, ...]:
    if _PATH_PATTERN.fullmatch(expression):
        return tuple(expression.split("."))
    msg = f"Unsupported {kind} expression '{expression}'."
    raise ValueError(msg)


def _render_nodes(*, nodes: tuple[_Node, ...], context: dict[str, object]) -> str:
    rendered_parts: list[str] = []

    for node in nodes:
        if isinstance(node, _TextNode):
            rendered_parts.append(node.value)
        elif isinstance(node, _VariableNode):
            rendered_parts.append(str(_lookup(context=context, path=node.path)))
        elif isinstance(node, _IfNode):
            matched = bool(_lookup(context=context, path=node.condition.path))
            if node.condition.negated:
                matched = not matched
            branch = node.truthy_nodes if matched else node.falsy_nodes
            rendered_parts.append(_render_nodes(nodes=branch, context=context))
        else:
            items = _lookup(context=context, path=node.source)
            if not isinstance(items, Iterable) or isinstance(items, str):
                msg = f"Assembly loop source '{'.'.join(node.source)}' is not iterable."
                raise ValueError(msg)
            for item in items:
                loop_context = {**context, node.target: item}
                rendered_parts.append(_render_nodes(nodes=node.body, context=loop_context))

    return "".join(rendered_parts)


def _lookup(*, context: dict[str, object], path: tuple[str, ...]) -> object:
    head, *attributes = path
    if head not in context:
        msg = f"Missing assembly variable '{head}'."
        raise ValueError(msg)
    value = context[head]
    for attribute in attributes:
        if not hasattr(value, attribute):
            msg = f"Assembly variable '{'.'.join(path)}' has no attribute '{attribute}'."
            raise ValueError(msg)
        value = getattr(value, attribute)
    return value
