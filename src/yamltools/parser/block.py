"""Indentation-driven block parser for the supported YAML subset."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import cast

from yamltools.models.nodes import Mapping, Node, Scalar, Sequence
from yamltools.parser.scalars import decode

# Header of a literal or folded block: style, then an optional indentation
# indicator and chomping indicator in either order.
_BLOCK_SCALAR_RE = re.compile(r"^([|>])(?=[1-9]?[+-]?$|[+-]?[1-9]?$)([1-9+-]*)$")

MAX_NESTING_DEPTH = 100


class YAMLSyntaxError(ValueError):
    """Raised on the first fatal syntax problem; carries the 1-based line."""

    def __init__(self, line: int, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Invalid YAML syntax at line {line}: {reason}")


# ---------------------------------------------------------------------------
# Parse state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Ref:
    """Pointer from a container slot to another container in the arena."""

    id: int


_Slot = Node | _Ref


@dataclass
class _Frame:
    container: int
    indent: int
    last_key: str | None = None
    # Set for frames opened by ``key:`` lines: where the container lives.
    owner: int | None = None
    owner_key: str | None = None


@dataclass
class _ParseState:
    """Arena of mutable containers plus the stack of open frames."""

    arena: list[dict[str, _Slot] | list[_Slot]] = field(default_factory=lambda: [{}])
    stack: list[_Frame] = field(default_factory=lambda: [_Frame(container=0, indent=-1)])

    @property
    def top(self) -> _Frame:
        return self.stack[-1]

    def new_mapping(self) -> int:
        self.arena.append({})
        return len(self.arena) - 1

    def new_sequence(self, items: list[_Slot] | None = None) -> int:
        self.arena.append(list(items or []))
        return len(self.arena) - 1

    def close_frames(self, indent: int) -> None:
        while len(self.stack) > 1 and self.stack[-1].indent >= indent:
            self.stack.pop()

    def freeze(self, slot: _Slot) -> Node:
        if not isinstance(slot, _Ref):
            return slot
        container = self.arena[slot.id]
        if isinstance(container, dict):
            return Mapping({key: self.freeze(value) for key, value in container.items()})
        return Sequence([self.freeze(item) for item in container])


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


def strip_comment(text: str) -> str:
    """Drop a trailing `` #`` comment that sits outside quotes."""
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "#" and (i == 0 or text[i - 1] in " \t"):
            return text[:i].rstrip()
    return text


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_list_item(stripped: str) -> bool:
    return stripped == "-" or stripped.startswith("- ")


def _split_key(stripped: str) -> tuple[str, str]:
    if stripped[0] in ("'", '"'):
        close = stripped.find(stripped[0], 1)
        if close > 0 and stripped[close + 1 :].lstrip().startswith(":"):
            rest = stripped[close + 1 :].lstrip()
            return stripped[1:close], rest[1:].strip()
    key, _, value = stripped.partition(":")
    key = key.strip()
    if len(key) >= 2 and key[0] in ("'", '"') and key[-1] == key[0]:
        key = key[1:-1]
    return key, value.strip()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class BlockParser:
    """Line-by-line parser tracking an indentation stack.

    Supports block mappings, block sequences of scalars, inline flow
    collections, and basic literal/folded block scalars. Anchors, tags,
    and multi-document streams are not supported.
    """

    def parse(self, text: str) -> Mapping:
        state = _ParseState()
        lines = text.splitlines()
        index = 0
        while index < len(lines):
            line = lines[index]
            lineno = index + 1
            index += 1

            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            indent = _indent_of(line)
            state.close_frames(indent)

            if _is_list_item(stripped):
                item = strip_comment(stripped[1:].strip())
                self._append_item(state, lineno, decode(item) if item else Scalar(None))
                continue

            if ":" not in stripped:
                raise YAMLSyntaxError(lineno, f'missing colon in "{stripped}"')
            key, value = _split_key(stripped)
            if not key:
                raise YAMLSyntaxError(lineno, "empty key")

            frame = state.top
            container = state.arena[frame.container]
            if isinstance(container, list):
                raise YAMLSyntaxError(lineno, "mapping entry inside a sequence")

            value = strip_comment(value)
            block = _BLOCK_SCALAR_RE.match(value)
            if block:
                text_value, index = self._read_block_scalar(lines, index, indent, block)
                container[key] = Scalar(text_value)
                frame.last_key = key
            elif not value:
                if len(state.stack) > MAX_NESTING_DEPTH:
                    raise YAMLSyntaxError(
                        lineno, f"nesting deeper than {MAX_NESTING_DEPTH} levels"
                    )
                child = state.new_mapping()
                container[key] = _Ref(child)
                frame.last_key = key
                state.stack.append(
                    _Frame(container=child, indent=indent, owner=frame.container, owner_key=key)
                )
            elif _is_list_item(value):
                rest = value[1:].strip()
                container[key] = _Ref(state.new_sequence([decode(rest) if rest else Scalar(None)]))
                frame.last_key = key
            else:
                container[key] = decode(value)
                frame.last_key = key

        return state.freeze(_Ref(0))  # type: ignore[return-value]

    # -- list items ----------------------------------------------------------

    def _append_item(self, state: _ParseState, lineno: int, item: Node) -> None:
        frame = state.top
        container = state.arena[frame.container]

        # A ``key:`` placeholder already coerced into a sequence.
        if isinstance(container, list):
            container.append(item)
            return

        # Empty ``key:`` placeholder: the owner's value becomes the sequence.
        if not container and frame.owner is not None and frame.owner_key is not None:
            seq = state.new_sequence()
            # Frames with an owner were opened by a ``key:`` line in a mapping.
            owner = cast(dict[str, _Slot], state.arena[frame.owner])
            owner[frame.owner_key] = _Ref(seq)
            frame.container = seq
            state.arena[seq].append(item)  # type: ignore[arg-type]
            return

        key = frame.last_key
        if key is None and container:
            key = next(reversed(container))
        if key is None:
            raise YAMLSyntaxError(lineno, "list item without parent key")

        seq = self._coerce_sequence(state, container, key, lineno)
        state.arena[seq].append(item)  # type: ignore[arg-type]

    @staticmethod
    def _coerce_sequence(
        state: _ParseState, container: dict[str, _Slot], key: str, lineno: int
    ) -> int:
        current = container.get(key)
        if isinstance(current, _Ref):
            target = state.arena[current.id]
            if isinstance(target, list):
                return current.id
            if target:
                raise YAMLSyntaxError(
                    lineno, f"list item is ambiguous: '{key}' already holds a mapping"
                )
        if isinstance(current, Sequence):
            seq = state.new_sequence(list(current.items))
        else:
            seq = state.new_sequence()
        container[key] = _Ref(seq)
        return seq

    # -- block scalars -------------------------------------------------------

    @staticmethod
    def _read_block_scalar(
        lines: list[str], index: int, parent_indent: int, header: re.Match[str]
    ) -> tuple[str, int]:
        style, flags = header.group(1), header.group(2)
        chomp = flags.strip("123456789")
        explicit = flags.strip("+-")
        body: list[str] = []
        while index < len(lines):
            line = lines[index]
            if line.strip() and _indent_of(line) <= parent_indent:
                break
            body.append(line)
            index += 1

        if explicit:
            content_indent = parent_indent + int(explicit)
        else:
            content_indent = min((_indent_of(ln) for ln in body if ln.strip()), default=0)
        body = [
            ln[min(content_indent, _indent_of(ln)) :] if ln.strip() else "" for ln in body
        ]

        trailing = 0
        while body and not body[-1]:
            body.pop()
            trailing += 1

        if style == "|":
            text = "\n".join(body)
        else:
            paragraphs: list[str] = []
            current: list[str] = []
            for ln in body:
                if ln:
                    current.append(ln.strip())
                else:
                    paragraphs.append(" ".join(current))
                    current = []
            paragraphs.append(" ".join(current))
            text = "\n".join(paragraphs)

        if chomp == "-" or not body:
            return text, index
        if chomp == "+":
            return text + "\n" * (trailing + 1), index
        return text + "\n", index
