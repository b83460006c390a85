"""Structured diagnostic models with source position tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class DiagnosticKind(StrEnum):
    INDENTATION = "indentation"
    WHITESPACE = "whitespace"
    SYNTAX = "syntax"
    QUOTES = "quotes"
    STRUCTURE = "structure"
    KEY_FORMAT = "key_format"
    BOOLEAN_INTERPRETATION = "boolean_interpretation"
    VERSION_QUOTING = "version_quoting"
    DATE_FORMAT = "date_format"
    COMPLEXITY = "complexity"
    LINE_LENGTH = "line_length"
    DOCUMENT_SIZE = "document_size"


class Diagnostic(BaseModel, frozen=True):
    """A single lint finding with optional location and suggestion."""

    severity: Severity
    kind: DiagnosticKind
    message: str
    line: int | None = None
    column: int | None = None
    suggestion: str | None = None


class Statistics(BaseModel):
    """Line and finding counts for a validated document."""

    total_lines: int = 0
    non_empty_lines: int = 0
    comment_lines: int = 0
    error_count: int = 0
    warning_count: int = 0


class ValidationReport(BaseModel):
    """Result of linting a document. Warnings never affect validity."""

    is_valid: bool
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []
    statistics: Statistics = Field(default_factory=Statistics)
