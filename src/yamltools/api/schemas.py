"""API request/response Pydantic schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DocumentRequest(BaseModel):
    """Request body for every POST /documents/* endpoint."""

    content: str = Field(description="YAML document text")


class ParseResponse(BaseModel):
    """Response body for POST /documents/parse."""

    data: Any = Field(description="Parsed document as a JSON tree")


class FormatResponse(BaseModel):
    """Response body for POST /documents/format."""

    content: str = Field(description="Document re-emitted in canonical form")


class ConvertResponse(BaseModel):
    """Response body for POST /documents/convert."""

    json_text: str = Field(description="Document encoded as JSON (2-space indent)")


class ErrorResponse(BaseModel):
    """Error detail returned with HTTP 422 when a document cannot be parsed."""

    error: str
    message: str
    line: int | None = None
    suggestion: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
