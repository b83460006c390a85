"""Scalar type inference and rendering for single unquoted tokens."""

from __future__ import annotations

import math
import re

from yamltools.models.nodes import Mapping, Node, Scalar, Sequence

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_QUOTES = ("'", '"')

# Flow collections nested deeper than this are kept as plain text.
MAX_FLOW_DEPTH = 32

# Characters that force a string to be written in quotes.
_SPECIAL_CHARS = frozenset(":#|>,")


def _strip_quotes(token: str) -> str | None:
    if len(token) >= 2 and token[0] in _QUOTES and token[-1] == token[0]:
        return token[1:-1]
    return None


def _split_flow(interior: str) -> list[str]:
    # Flat split: nested brackets are not tracked.
    return [item.strip() for item in interior.split(",")]


def _decode_number(token: str) -> Node:
    try:
        if "." in token or "e" in token or "E" in token:
            value = float(token)
            if not math.isfinite(value):
                return Scalar(token)
            return Scalar(value)
        return Scalar(int(token))
    except ValueError:
        # int() refuses digit strings past the interpreter's conversion limit.
        return Scalar(token)


def decode(token: str) -> Node:
    """Infer the node for a single token. Never raises.

    Quoted text is returned verbatim without escape processing; anything
    that is not a boolean, null, finite number, or flow collection is a
    string. Flow collections nested more than ``MAX_FLOW_DEPTH`` levels
    deep stay strings.
    """
    return _decode(token, 0)


def _decode(token: str, level: int) -> Node:
    token = token.strip()

    unquoted = _strip_quotes(token)
    if unquoted is not None:
        return Scalar(unquoted)

    if token == "true":
        return Scalar(True)
    if token == "false":
        return Scalar(False)
    if token in ("null", "~"):
        return Scalar(None)

    if _NUMBER_RE.match(token):
        return _decode_number(token)

    if level >= MAX_FLOW_DEPTH:
        return Scalar(token)

    if token.startswith("[") and token.endswith("]"):
        interior = token[1:-1].strip()
        if not interior:
            return Sequence([])
        return Sequence([_decode(item, level + 1) for item in _split_flow(interior)])

    if token.startswith("{") and token.endswith("}"):
        interior = token[1:-1].strip()
        entries: dict[str, Node] = {}
        if interior:
            for item in _split_flow(interior):
                key, sep, value = item.partition(":")
                key = key.strip()
                unquoted_key = _strip_quotes(key)
                if unquoted_key is not None:
                    key = unquoted_key
                entries[key] = _decode(value, level + 1) if sep else Scalar(None)
        return Mapping(entries)

    return Scalar(token)


def _needs_quotes(text: str) -> bool:
    if not text or text != text.strip():
        return True
    if any(ch in _SPECIAL_CHARS for ch in text):
        return True
    if text.startswith("- ") or text[0] in _QUOTES:
        return True
    # Anything that would read back as another kind (number, bool, null, flow).
    return decode(text) != Scalar(text)


def quote(text: str) -> str:
    """Wrap *text* in quotes that do not occur inside it where possible.

    Quoted scalars carry no escapes, so a double quote inside double quotes
    would end the scalar early on re-reading.
    """
    if '"' in text and "'" not in text:
        return f"'{text}'"
    return f'"{text}"'


def fits_inline(text: str) -> bool:
    """False when no single-line quoting keeps *text* intact.

    Text holding both quote characters and a ``#`` can have a comment
    marker outside any quote pair once wrapped.
    """
    return "\n" not in text and not ('"' in text and "'" in text and "#" in text)


def encode(node: Node) -> str:
    """Render a node as a single-line token; the inverse of :func:`decode`."""
    match node:
        case Scalar(value=None):
            return "null"
        case Scalar(value=True):
            return "true"
        case Scalar(value=False):
            return "false"
        case Scalar(value=str() as text):
            return quote(text) if _needs_quotes(text) else text
        case Scalar(value=number):
            return repr(number)
        case Sequence(items=items):
            return "[" + ", ".join(encode(item) for item in items) + "]"
        case Mapping(entries=entries):
            inner = ", ".join(f"{key}: {encode(value)}" for key, value in entries.items())
            return "{" + inner + "}"
    raise TypeError(f"Cannot encode {type(node).__name__}")
