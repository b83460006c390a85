"""Canonical text rendering of node trees: two-space indent, insertion order."""

from __future__ import annotations

from yamltools.models.nodes import Mapping, Node, Scalar, Sequence
from yamltools.parser.scalars import encode, fits_inline

_INDENT = "  "
_KEY_SPECIAL_CHARS = frozenset(" :{}[],&*#?|<>=!%@`\"'")


def _format_key(key: str) -> str:
    if not key or key[0] == "-" or any(ch in _KEY_SPECIAL_CHARS for ch in key):
        return f"'{key}'" if '"' in key else f'"{key}"'
    return key


class YAMLSerializer:
    """Renders a node tree back into block-style text.

    Comments are not part of the tree and are not reproduced.
    """

    def format(self, node: Node, indent_level: int = 0) -> str:
        match node:
            case Mapping():
                return "".join(self._mapping_lines(node, indent_level))
            case Sequence(items=items) if items:
                prefix = _INDENT * indent_level
                return "".join(f"{prefix}- {encode(item)}\n" for item in items)
            case _:
                return f"{_INDENT * indent_level}{encode(node)}\n"

    def _mapping_lines(self, node: Mapping, level: int) -> list[str]:
        prefix = _INDENT * level
        out: list[str] = []
        for raw_key, value in node.entries.items():
            key = _format_key(raw_key)
            match value:
                case Sequence(items=[]):
                    out.append(f"{prefix}{key}: []\n")
                case Sequence(items=items):
                    out.append(f"{prefix}{key}:\n")
                    out.extend(f"{prefix}{_INDENT}- {encode(item)}\n" for item in items)
                case Mapping():
                    out.append(f"{prefix}{key}:\n")
                    out.extend(self._mapping_lines(value, level + 1))
                case Scalar(value=str() as text) if not fits_inline(text):
                    out.extend(self._literal_lines(prefix, key, text))
                case _:
                    out.append(f"{prefix}{key}: {encode(value)}\n")
        return out

    @staticmethod
    def _literal_lines(prefix: str, key: str, text: str) -> list[str]:
        """Text as a ``|`` block scalar with matching chomping.

        An indentation indicator is added when every line starts with a
        space, since the content indent would otherwise swallow it.
        """
        body = text.rstrip("\n")
        trailing = len(text) - len(body)
        chomp = "-" if trailing == 0 else ("" if trailing == 1 else "+")
        lines = body.split("\n")
        filled = [line for line in lines if line]
        indicator = str(len(_INDENT)) if filled and all(ln[0] == " " for ln in filled) else ""
        out = [f"{prefix}{key}: |{indicator}{chomp}\n"]
        for line in lines:
            out.append(f"{prefix}{_INDENT}{line}\n" if line else "\n")
        out.extend("\n" for _ in range(trailing - 1))
        return out


def dump(node: Node) -> str:
    """Render *node* in canonical form."""
    return YAMLSerializer().format(node)
