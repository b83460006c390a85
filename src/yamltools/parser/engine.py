"""The grammar engine interface implemented by BlockParser and RuamelEngine."""

from __future__ import annotations

from typing import Protocol

from yamltools.models.nodes import Node


class GrammarEngine(Protocol):
    """Anything that turns document text into a node tree.

    Implementations raise ``YAMLSyntaxError``, ``ReferenceParseError`` or
    ``YAMLSafetyError`` when the text cannot be parsed.
    """

    def parse(self, text: str) -> Node: ...
