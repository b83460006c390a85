"""Dependency injection for FastAPI: the DocumentService singleton."""

from __future__ import annotations

from yamltools.service.document_service import DocumentService

_document_service: DocumentService | None = None


def init_document_service(service: DocumentService) -> None:
    """Set the global DocumentService (called at app startup)."""
    global _document_service  # noqa: PLW0603
    _document_service = service


def get_document_service() -> DocumentService:
    """FastAPI ``Depends`` provider for DocumentService."""
    if _document_service is None:
        raise RuntimeError(
            "DocumentService not initialised; call init_document_service() first"
        )
    return _document_service


def reset_document_service() -> None:
    """Clear the global DocumentService (for tests)."""
    global _document_service  # noqa: PLW0603
    _document_service = None
