"""Parsing and linting for the yamltools YAML subset."""

from yamltools.parser.block import BlockParser, YAMLSyntaxError
from yamltools.parser.engine import GrammarEngine
from yamltools.parser.linter import YAMLLinter
from yamltools.parser.loader import (
    ReferenceLoader,
    ReferenceParseError,
    RuamelEngine,
    YAMLSafetyError,
)
from yamltools.parser.scalars import decode, encode

__all__ = [
    "BlockParser",
    "GrammarEngine",
    "ReferenceLoader",
    "ReferenceParseError",
    "RuamelEngine",
    "YAMLLinter",
    "YAMLSafetyError",
    "YAMLSyntaxError",
    "decode",
    "encode",
]
