"""Reference endpoint: GET /reference/language."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from yamltools.language_reference import LANGUAGE_REFERENCE

router = APIRouter()


class ReferenceResponse(BaseModel):
    """Response for GET /reference/language."""

    reference: str = Field(description="Reference text for the supported YAML subset")


@router.get("/language", response_model=ReferenceResponse)
async def get_language_reference() -> ReferenceResponse:
    """Return the reference for the supported YAML subset."""
    return ReferenceResponse(reference=LANGUAGE_REFERENCE)
