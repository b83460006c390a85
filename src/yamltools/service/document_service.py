"""Document service: the parse/validate/format/convert façade used by the REST API and MCP."""

from __future__ import annotations

import json
import logging

from yamltools.models.errors import ValidationReport
from yamltools.models.nodes import Node
from yamltools.parser.block import MAX_NESTING_DEPTH, BlockParser, YAMLSyntaxError
from yamltools.parser.engine import GrammarEngine
from yamltools.parser.linter import YAMLLinter
from yamltools.parser.loader import (
    ReferenceLoader,
    ReferenceParseError,
    RuamelEngine,
    YAMLSafetyError,
)
from yamltools.serializer import YAMLSerializer
from yamltools.settings import Settings

logger = logging.getLogger("yamltools.service")

VALIDATE_FIRST_HINT = "Run validation first to locate and fix syntax errors"


class DocumentError(Exception):
    """A document that could not be parsed, formatted, or converted."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        suggestion: str | None = VALIDATE_FIRST_HINT,
    ) -> None:
        self.message = message
        self.line = line
        self.suggestion = suggestion
        super().__init__(message)


class DocumentService:
    """Stateless façade over a grammar engine, the linter, and the serializer.

    The grammar engine is injected at construction (``BlockParser`` by
    default); every call works on freshly built state, so one instance can
    be shared freely.
    """

    def __init__(
        self,
        engine: GrammarEngine | None = None,
        linter: YAMLLinter | None = None,
        serializer: YAMLSerializer | None = None,
    ) -> None:
        self._engine: GrammarEngine = engine or BlockParser()
        self._linter = linter or YAMLLinter(parser=self._engine)
        self._serializer = serializer or YAMLSerializer()

    @classmethod
    def from_settings(cls, settings: Settings) -> DocumentService:
        """Build a service whose engine and lint limits come from *settings*."""
        engine: GrammarEngine
        if settings.engine == "ruamel":
            engine = RuamelEngine(ReferenceLoader(max_document_size=settings.max_document_size))
        else:
            engine = BlockParser()
        linter = YAMLLinter(
            parser=engine,
            reference=ReferenceLoader(
                max_document_size=settings.max_document_size, max_depth=MAX_NESTING_DEPTH
            ),
            max_line_length=settings.max_line_length,
            max_nesting_depth=settings.max_nesting_depth,
            max_document_size=settings.max_document_size,
        )
        return cls(engine=engine, linter=linter)

    # -- helpers -------------------------------------------------------------

    def _parse_or_raise(self, text: str) -> Node:
        try:
            return self._engine.parse(text)
        except (YAMLSyntaxError, ReferenceParseError) as exc:
            raise DocumentError(str(exc), line=exc.line) from exc
        except YAMLSafetyError as exc:
            raise DocumentError(str(exc), suggestion=None) from exc

    # -- public API ----------------------------------------------------------

    def parse(self, text: str) -> Node:
        """Parse *text* into a node tree.  Raises ``DocumentError``."""
        logger.info("parse called (yaml length=%d)", len(text))
        return self._parse_or_raise(text)

    def validate(self, text: str) -> ValidationReport:
        """Lint *text*.  Never raises; an unparseable document is simply invalid."""
        logger.info("validate called (yaml length=%d)", len(text))
        logger.debug("validate yaml:\n%s", text)
        return self._linter.lint(text)

    def format(self, text: str) -> str:
        """Parse *text* and re-emit it in canonical form."""
        logger.info("format called (yaml length=%d)", len(text))
        try:
            tree = self._parse_or_raise(text)
        except DocumentError as exc:
            logger.warning("format failed: %s", exc)
            raise
        return self._serializer.format(tree)

    def convert(self, text: str) -> str:
        """Parse *text* and encode the tree as JSON with a two-space indent."""
        logger.info("convert called (yaml length=%d)", len(text))
        try:
            tree = self._parse_or_raise(text)
        except DocumentError as exc:
            logger.warning("convert failed: %s", exc)
            raise
        return json.dumps(tree.to_python(), indent=2, ensure_ascii=False)
