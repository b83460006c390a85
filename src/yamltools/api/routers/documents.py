"""Document endpoints: parse, validate, format, and convert YAML text."""

from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException

from yamltools.api.deps import get_document_service
from yamltools.api.schemas import (
    ConvertResponse,
    DocumentRequest,
    ErrorResponse,
    FormatResponse,
    ParseResponse,
)
from yamltools.models.errors import ValidationReport
from yamltools.service.document_service import DocumentError, DocumentService

router = APIRouter()


def _unprocessable(exc: DocumentError, error: str) -> NoReturn:
    detail = ErrorResponse(
        error=error,
        message=exc.message,
        line=exc.line,
        suggestion=exc.suggestion,
    )
    raise HTTPException(status_code=422, detail=detail.model_dump()) from None


@router.post("/parse", response_model=ParseResponse)
async def parse_document(
    body: DocumentRequest,
    service: DocumentService = Depends(get_document_service),  # noqa: B008
) -> ParseResponse:
    """Parse a document and return its tree as JSON."""
    try:
        tree = service.parse(body.content)
    except DocumentError as exc:
        _unprocessable(exc, "PARSE_ERROR")
    return ParseResponse(data=tree.to_python())


@router.post("/validate", response_model=ValidationReport)
async def validate_document(
    body: DocumentRequest,
    service: DocumentService = Depends(get_document_service),  # noqa: B008
) -> ValidationReport:
    """Lint a document.  Always 200; check ``is_valid`` in the report."""
    return service.validate(body.content)


@router.post("/format", response_model=FormatResponse)
async def format_document(
    body: DocumentRequest,
    service: DocumentService = Depends(get_document_service),  # noqa: B008
) -> FormatResponse:
    """Re-emit a document in canonical form."""
    try:
        content = service.format(body.content)
    except DocumentError as exc:
        _unprocessable(exc, "FORMAT_ERROR")
    return FormatResponse(content=content)


@router.post("/convert", response_model=ConvertResponse)
async def convert_document(
    body: DocumentRequest,
    service: DocumentService = Depends(get_document_service),  # noqa: B008
) -> ConvertResponse:
    """Convert a document to JSON text."""
    try:
        json_text = service.convert(body.content)
    except DocumentError as exc:
        _unprocessable(exc, "CONVERT_ERROR")
    return ConvertResponse(json_text=json_text)
