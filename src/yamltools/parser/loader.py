"""Reference-grade YAML loading via ruamel.yaml, with safety limits."""

from __future__ import annotations

import re
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from yamltools.models.nodes import Node, from_python

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 20

# Regex to detect YAML anchor definitions (&name).
# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name, but NOT inside quoted strings (good-enough heuristic).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:\[,])&(\w+)", re.MULTILINE)


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these indicate potentially malicious input
    (e.g., billion-laughs anchors or oversized documents).
    """


class ReferenceParseError(Exception):
    """ruamel.yaml rejected the document; ``line`` is 1-based when known."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)


class ReferenceLoader:
    """Full-grammar YAML loader used to cross-check the block parser.

    Uses ruamel.yaml in round-trip mode so that mark information is kept
    for error reporting; results are converted to plain Python data.
    """

    def __init__(
        self,
        max_document_size: int = _MAX_DOCUMENT_SIZE,
        max_node_count: int = _MAX_NODE_COUNT,
        max_depth: int = _MAX_DEPTH,
    ) -> None:
        self._yaml = YAML()
        self._yaml.preserve_quotes = True
        self._yaml.max_depth = max_depth
        self._max_depth = max_depth
        self._max_document_size = max_document_size
        self._max_node_count = max_node_count

    # -- safety checks -------------------------------------------------------

    def _check_yaml_safety(self, content: str) -> None:
        """Pre-parse safety checks on raw YAML text.

        Raises ``YAMLSafetyError`` if the content contains anchors/aliases
        or exceeds the maximum document size.
        """
        if len(content) > self._max_document_size:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )
        if _ANCHOR_RE.search(content):
            raise YAMLSafetyError("YAML anchors/aliases are not supported")

    def _check_node_count(self, data: Any) -> None:
        """Post-parse defense-in-depth: reject too many nodes or too deep nesting."""
        count = 0
        stack: list[tuple[Any, int]] = [(data, 0)]
        while stack:
            node, level = stack.pop()
            count += 1
            if count > self._max_node_count:
                raise YAMLSafetyError(
                    f"YAML document exceeds maximum node count ({self._max_node_count:,})"
                )
            if level > self._max_depth:
                raise YAMLSafetyError(
                    f"YAML document exceeds maximum nesting depth ({self._max_depth})"
                )
            if isinstance(node, dict):
                stack.extend((child, level + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, level + 1) for child in node)

    # -- public loading API --------------------------------------------------

    def load_string(self, content: str) -> Any:
        """Load YAML from a string into plain dicts, lists, and scalars.

        Raises ``YAMLSafetyError`` or ``ReferenceParseError``.
        """
        self._check_yaml_safety(content)
        try:
            data = self._yaml.load(content)
        except MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            line = mark.line + 1 if mark is not None else None
            raise ReferenceParseError(str(exc), line=line) from exc
        except YAMLError as exc:
            raise ReferenceParseError(str(exc)) from exc
        except RecursionError as exc:
            # The composer recurses once per nesting level.
            raise ReferenceParseError("YAML document is nested too deeply to parse") from exc
        if data is None:
            return {}
        self._check_node_count(data)
        return self._to_plain_value(data)

    def _to_plain_value(self, data: Any) -> Any:
        """Convert ruamel.yaml CommentedMap/Seq to plain Python dict/list."""
        if isinstance(data, (CommentedMap, dict)):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, (CommentedSeq, list)):
            return [self._to_plain_value(item) for item in data]
        if isinstance(data, bool) or data is None:
            return data
        # ruamel wraps scalars (ScalarFloat, ScalarInt, quoted strings) in subclasses
        if isinstance(data, int):
            return int(data)
        if isinstance(data, float):
            return float(data)
        # Strings, plus timestamps and other tagged scalars, as text.
        return str(data)


class RuamelEngine:
    """Grammar engine backed by :class:`ReferenceLoader`.

    A drop-in alternative to ``BlockParser`` for callers that need the full
    YAML grammar (nested sequences of mappings, multi-line flow, etc.).
    """

    def __init__(self, loader: ReferenceLoader | None = None) -> None:
        self._loader = loader or ReferenceLoader()

    def parse(self, text: str) -> Node:
        return from_python(self._loader.load_string(text))
