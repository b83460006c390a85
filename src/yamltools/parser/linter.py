"""Line-scanning lint pass: indentation, quoting, key format, value coercion risks."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from yamltools.models.errors import (
    Diagnostic,
    DiagnosticKind,
    Severity,
    Statistics,
    ValidationReport,
)
from yamltools.models.nodes import depth, from_python
from yamltools.parser.block import (
    MAX_NESTING_DEPTH,
    BlockParser,
    YAMLSyntaxError,
    strip_comment,
)
from yamltools.parser.engine import GrammarEngine
from yamltools.parser.loader import ReferenceLoader, ReferenceParseError, YAMLSafetyError

logger = logging.getLogger("yamltools.parser")

_DEFAULT_MAX_LINE_LENGTH = 120
_DEFAULT_MAX_NESTING_DEPTH = 10
_DEFAULT_MAX_DOCUMENT_SIZE = 5_000_000

_BLOCK_OPENER_RE = re.compile(r"^[|>](?:[1-9]?[+-]?|[+-][1-9])$")
_VERSION_RE = re.compile(r"^\d+\.\d+")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_UNESCAPED_DQUOTE_RE = re.compile(r'(?<!\\)"')

_KEY_SPECIAL_CHARS = frozenset(" {}[],&*#?|<>=!%@`")
_BOOLEAN_LIKE = frozenset({"yes", "no", "on", "off", "y", "n"})
_QUOTES = ("'", '"')


@dataclass
class _Line:
    """One physical line with its precomputed parts."""

    number: int
    raw: str
    stripped: str
    indent: int

    @property
    def is_list_item(self) -> bool:
        return self.stripped == "-" or self.stripped.startswith("- ")

    @property
    def is_comment(self) -> bool:
        return self.stripped.startswith("#")

    @property
    def body(self) -> str:
        """Content without the list marker."""
        if self.is_list_item:
            return self.stripped[1:].strip()
        return self.stripped


@dataclass
class _ScanState:
    indent_size: int | None = None
    block_indent: int | None = None
    # Indent of the last non-empty line seen.
    prev_indent: int = 0


def _split_key_value(body: str) -> tuple[str, str] | None:
    """Split ``key: value`` at the first mapping colon outside quotes.

    A mapping colon is followed by whitespace or ends the line, so
    ``http://host`` and ``12:30`` are not split.
    """
    quote: str | None = None
    for i, ch in enumerate(body):
        if quote:
            if ch == quote:
                quote = None
        elif ch in _QUOTES and i == 0:
            quote = ch
        elif ch == ":" and (i + 1 == len(body) or body[i + 1] in " \t"):
            return body[:i].strip(), body[i + 1 :].strip()
    return None


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]


def _error(kind: DiagnosticKind, message: str, line: _Line, **kwargs: object) -> Diagnostic:
    return Diagnostic(
        severity=Severity.ERROR, kind=kind, message=message, line=line.number, **kwargs
    )


def _warning(kind: DiagnosticKind, message: str, line: _Line, **kwargs: object) -> Diagnostic:
    return Diagnostic(
        severity=Severity.WARNING, kind=kind, message=message, line=line.number, **kwargs
    )


class YAMLLinter:
    """Best-effort lint pass producing a :class:`ValidationReport`.

    Every line is checked; no finding stops the scan. After the scan the
    document is parsed by the grammar engine (``BlockParser`` unless another
    is given), where a failure becomes a syntax error, and by the reference
    loader, whose success enables the nesting-depth and line-length checks.
    """

    def __init__(
        self,
        parser: GrammarEngine | None = None,
        reference: ReferenceLoader | None = None,
        *,
        max_line_length: int = _DEFAULT_MAX_LINE_LENGTH,
        max_nesting_depth: int = _DEFAULT_MAX_NESTING_DEPTH,
        max_document_size: int = _DEFAULT_MAX_DOCUMENT_SIZE,
    ) -> None:
        self._parser: GrammarEngine = parser or BlockParser()
        self._reference = reference or ReferenceLoader(max_depth=MAX_NESTING_DEPTH)
        self._max_line_length = max_line_length
        self._max_nesting_depth = max_nesting_depth
        self._max_document_size = max_document_size

    def lint(self, text: str) -> ValidationReport:
        if len(text) > self._max_document_size:
            error = Diagnostic(
                severity=Severity.ERROR,
                kind=DiagnosticKind.DOCUMENT_SIZE,
                message=(
                    f"Document exceeds maximum size "
                    f"({len(text):,} chars > {self._max_document_size:,} limit)"
                ),
                suggestion="Split the document into smaller files",
            )
            return self._report([error], [], Statistics())

        lines = [
            _Line(number=i + 1, raw=raw, stripped=raw.strip(), indent=len(raw) - len(raw.lstrip()))
            for i, raw in enumerate(text.splitlines())
        ]
        stats = Statistics(
            total_lines=len(lines),
            non_empty_lines=sum(1 for ln in lines if ln.stripped),
            comment_lines=sum(1 for ln in lines if ln.is_comment),
        )

        findings: list[Diagnostic] = []
        state = _ScanState()
        for line in lines:
            findings.extend(self._check_line(line, state))
            if line.stripped:
                state.prev_indent = line.indent

        findings.extend(self._check_parses(text, findings))
        findings.extend(self._check_best_practices(text, lines))

        errors = [d for d in findings if d.severity is Severity.ERROR]
        warnings = [d for d in findings if d.severity is Severity.WARNING]
        return self._report(errors, warnings, stats)

    @staticmethod
    def _report(
        errors: list[Diagnostic], warnings: list[Diagnostic], stats: Statistics
    ) -> ValidationReport:
        stats.error_count = len(errors)
        stats.warning_count = len(warnings)
        return ValidationReport(
            is_valid=not errors, errors=errors, warnings=warnings, statistics=stats
        )

    # -- per-line rules ------------------------------------------------------

    def _check_line(self, line: _Line, state: _ScanState) -> list[Diagnostic]:
        if not line.stripped:
            return self._check_trailing_whitespace(line)

        # Lines inside a literal/folded block scalar are free text.
        if state.block_indent is not None:
            if line.indent > state.block_indent:
                return self._check_trailing_whitespace(line)
            state.block_indent = None

        found: list[Diagnostic] = []
        found.extend(self._check_tabs(line))
        found.extend(self._check_trailing_whitespace(line))
        if line.is_comment:
            return found

        found.extend(self._check_indent_consistency(line, state))
        found.extend(self._check_missing_colon(line, state))
        found.extend(self._check_quotes(line))

        pair = _split_key_value(line.body)
        if line.is_list_item:
            found.extend(self._check_list_item_structure(line))
        if pair is not None:
            key, value = pair
            found.extend(self._check_key_format(line, key))
        else:
            value = line.body if line.is_list_item else ""
        value = strip_comment(value)
        if _BLOCK_OPENER_RE.match(value):
            state.block_indent = line.indent
        found.extend(self._check_value(line, value))
        return found

    def _check_tabs(self, line: _Line) -> list[Diagnostic]:
        if "\t" not in line.raw:
            return []
        return [
            _error(
                DiagnosticKind.INDENTATION,
                "Tab character found; YAML indentation must use spaces",
                line,
                column=line.raw.index("\t") + 1,
                suggestion="Replace tabs with spaces",
            )
        ]

    def _check_trailing_whitespace(self, line: _Line) -> list[Diagnostic]:
        trimmed = line.raw.rstrip()
        if trimmed == line.raw:
            return []
        return [
            _warning(
                DiagnosticKind.WHITESPACE,
                "Trailing whitespace",
                line,
                column=len(trimmed) + 1,
                suggestion="Remove trailing spaces",
            )
        ]

    def _check_indent_consistency(self, line: _Line, state: _ScanState) -> list[Diagnostic]:
        """The first indented non-list line fixes the step; later lines must be multiples."""
        if line.is_list_item or line.indent == 0 or "\t" in line.raw[: line.indent]:
            return []
        if state.indent_size is None:
            state.indent_size = line.indent
            return []
        size = state.indent_size
        if line.indent % size == 0:
            return []
        nearest = max(size, round(line.indent / size) * size)
        return [
            _error(
                DiagnosticKind.INDENTATION,
                (
                    f"Inconsistent indentation: {line.indent} spaces is not a "
                    f"multiple of {size}"
                ),
                line,
                column=1,
                suggestion=f"Use {nearest} spaces",
            )
        ]

    def _check_missing_colon(self, line: _Line, state: _ScanState) -> list[Diagnostic]:
        """Only lines following a top-level line are checked."""
        stripped = line.stripped
        if state.prev_indent != 0 or line.is_list_item or ":" in stripped:
            return []
        # Block scalar indicators and quoted multi-line scalars open free text.
        if stripped[0] in "|>" or stripped[0] in _QUOTES:
            return []
        return [
            _error(
                DiagnosticKind.SYNTAX,
                f'Missing colon in "{stripped}"',
                line,
                column=len(stripped) + 1,
                suggestion=f"Use '{stripped}: <value>' for a key/value pair",
            )
        ]

    def _check_quotes(self, line: _Line) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        if line.stripped.count("'") % 2:
            found.append(
                _error(
                    DiagnosticKind.QUOTES,
                    "Unclosed single quote",
                    line,
                    column=line.raw.index("'") + 1,
                    suggestion="Close the quote, or escape an apostrophe as ''",
                )
            )
        if len(_UNESCAPED_DQUOTE_RE.findall(line.stripped)) % 2:
            found.append(
                _error(
                    DiagnosticKind.QUOTES,
                    "Unclosed double quote",
                    line,
                    column=line.raw.index('"') + 1,
                    suggestion='Close the quote with a matching "',
                )
            )
        return found

    def _check_list_item_structure(self, line: _Line) -> list[Diagnostic]:
        body = line.body
        if ":" not in body or body.split(":", 1)[1].strip():
            return []
        return [
            _warning(
                DiagnosticKind.STRUCTURE,
                f'List item "{body}" has a key without a value',
                line,
                column=line.indent + 1,
                suggestion="Add a value, or indent the nested mapping under the item",
            )
        ]

    def _check_key_format(self, line: _Line, key: str) -> list[Diagnostic]:
        if not key or _is_quoted(key) or key[0] in "[{":
            return []
        bad = sorted({ch for ch in key if ch in _KEY_SPECIAL_CHARS})
        if not bad:
            return []
        shown = ", ".join("space" if ch == " " else repr(ch) for ch in bad)
        return [
            _error(
                DiagnosticKind.KEY_FORMAT,
                f'Key "{key}" contains special characters ({shown}) and must be quoted',
                line,
                column=line.raw.index(key) + 1,
                suggestion=f'Write the key as "{key}"',
            )
        ]

    def _check_value(self, line: _Line, value: str) -> list[Diagnostic]:
        if not value or value[0] in _QUOTES:
            return []
        column = line.raw.rfind(value) + 1
        found: list[Diagnostic] = []
        if value.lower() in _BOOLEAN_LIKE:
            found.append(
                _warning(
                    DiagnosticKind.BOOLEAN_INTERPRETATION,
                    f'"{value}" may be read as a boolean by YAML 1.1 parsers',
                    line,
                    column=column,
                    suggestion=f'Quote it ("{value}") or use true/false',
                )
            )
        if _VERSION_RE.match(value):
            found.append(
                _warning(
                    DiagnosticKind.VERSION_QUOTING,
                    f'"{value}" will be read as a number',
                    line,
                    column=column,
                    suggestion=f'Quote version strings: "{value}"',
                )
            )
        if _DATE_RE.match(value):
            found.append(
                _warning(
                    DiagnosticKind.DATE_FORMAT,
                    f'"{value}" may be read as a date',
                    line,
                    column=column,
                    suggestion=f'Quote it ("{value}") to keep it a string',
                )
            )
        return found

    # -- whole-document rules ------------------------------------------------

    def _check_parses(self, text: str, found: list[Diagnostic]) -> list[Diagnostic]:
        """Report the grammar engine's fatal error unless a line rule already did."""
        try:
            self._parser.parse(text)
        except (YAMLSyntaxError, ReferenceParseError) as exc:
            if exc.line is not None and any(
                d.kind is DiagnosticKind.SYNTAX and d.line == exc.line for d in found
            ):
                return []
            where = "at this line " if exc.line is not None else ""
            return [
                Diagnostic(
                    severity=Severity.ERROR,
                    kind=DiagnosticKind.SYNTAX,
                    message=str(exc),
                    line=exc.line,
                    suggestion=f"Fix the structure {where}before formatting or converting",
                )
            ]
        except YAMLSafetyError as exc:
            return [
                Diagnostic(severity=Severity.ERROR, kind=DiagnosticKind.SYNTAX, message=str(exc))
            ]
        return []

    def _check_best_practices(self, text: str, lines: list[_Line]) -> list[Diagnostic]:
        try:
            data = self._reference.load_string(text)
        except (ReferenceParseError, YAMLSafetyError) as exc:
            logger.debug("Reference parse failed, skipping best-practice checks: %s", exc)
            return []

        found: list[Diagnostic] = []
        nesting = depth(from_python(data))
        if nesting > self._max_nesting_depth:
            found.append(
                Diagnostic(
                    severity=Severity.WARNING,
                    kind=DiagnosticKind.COMPLEXITY,
                    message=(
                        f"Nesting depth {nesting} exceeds {self._max_nesting_depth} levels"
                    ),
                    suggestion="Flatten the structure or split it into separate documents",
                )
            )
        for line in lines:
            if len(line.raw) > self._max_line_length:
                found.append(
                    _warning(
                        DiagnosticKind.LINE_LENGTH,
                        (
                            f"Line is {len(line.raw)} characters long "
                            f"(limit {self._max_line_length})"
                        ),
                        line,
                        column=self._max_line_length + 1,
                        suggestion="Break long values with a folded block scalar (>)",
                    )
                )
        return found
