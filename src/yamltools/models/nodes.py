"""Immutable document tree nodes. Parsers produce these, the serializer consumes them."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ScalarKind(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class Scalar:
    """An atomic leaf value: string, integer, float, boolean, or null."""

    value: str | int | float | bool | None

    @property
    def kind(self) -> ScalarKind:
        # bool must be checked before int (bool is an int subclass)
        if self.value is None:
            return ScalarKind.NULL
        if isinstance(self.value, bool):
            return ScalarKind.BOOLEAN
        if isinstance(self.value, int):
            return ScalarKind.INTEGER
        if isinstance(self.value, float):
            return ScalarKind.FLOAT
        return ScalarKind.STRING

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Sequence:
    """An ordered list of nodes."""

    items: list[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.items)

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class Mapping:
    """String-keyed nodes in insertion order."""

    entries: dict[str, Node] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, key: str) -> Node:
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def keys(self) -> list[str]:
        return list(self.entries)

    def to_python(self) -> dict[str, Any]:
        return {key: value.to_python() for key, value in self.entries.items()}


# The union of all node types.
Node = Scalar | Sequence | Mapping


def from_python(data: Any) -> Node:
    """Build a node tree from plain Python data (dicts, lists, scalars).

    Values outside the scalar kinds (dates, decimals, ...) are kept as
    their string form, and so are non-finite floats. Mapping keys are
    stringified.
    """
    if isinstance(data, dict):
        return Mapping({str(k): from_python(v) for k, v in data.items()})
    if isinstance(data, (list, tuple)):
        return Sequence([from_python(item) for item in data])
    if data is None or isinstance(data, (bool, str)):
        return Scalar(data)
    if isinstance(data, int):
        return Scalar(int(data))
    if isinstance(data, float):
        if math.isnan(data):
            return Scalar(".nan")
        if math.isinf(data):
            return Scalar(".inf" if data > 0 else "-.inf")
        return Scalar(float(data))
    return Scalar(str(data))


def depth(node: Node) -> int:
    """Nesting depth of containers; a scalar has depth 0."""
    match node:
        case Mapping(entries=entries):
            return 1 + max((depth(v) for v in entries.values()), default=0)
        case Sequence(items=items):
            return 1 + max((depth(v) for v in items), default=0)
        case _:
            return 0
