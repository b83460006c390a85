"""Regression tests for RequestBodyLimitMiddleware."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from yamltools.api.app import create_app
from yamltools.api.deps import init_document_service, reset_document_service
from yamltools.service.document_service import DocumentService
from yamltools.settings import Settings


@pytest.fixture
def app():
    settings = Settings(_env_file=None, max_request_body=1024)
    application = create_app(settings=settings)
    init_document_service(DocumentService.from_settings(settings))
    yield application
    reset_document_service()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestInvalidContentLength:
    """Non-integer Content-Length must not cause a 500."""

    async def test_non_integer_content_length(self, client: AsyncClient) -> None:
        """Invalid Content-Length (non-int) falls through to streaming, not 500."""
        response = await client.post(
            "/documents/validate",
            content=b'{"content": "a: 1"}',
            headers={"content-length": "not-a-number", "content-type": "application/json"},
        )
        assert response.status_code != 500

    async def test_negative_content_length(self, client: AsyncClient) -> None:
        response = await client.post(
            "/documents/validate",
            content=b'{"content": "a: 1"}',
            headers={"content-length": "-1", "content-type": "application/json"},
        )
        assert response.status_code != 500


class TestDeclaredOverLimit:
    async def test_content_length_over_limit(self, client: AsyncClient) -> None:
        body = '{"content": "' + "a: 1\\n" * 400 + '"}'
        response = await client.post(
            "/documents/validate",
            content=body.encode(),
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 413
        assert "1,024 bytes" in response.json()["detail"]

    async def test_small_body_passes(self, client: AsyncClient) -> None:
        response = await client.post("/documents/validate", json={"content": "a: 1\n"})
        assert response.status_code == 200
        assert response.json()["is_valid"] is True


class TestChunkedOverLimit:
    """Chunked (no Content-Length) body over limit is still rejected."""

    async def test_chunked_body_over_limit(self, client: AsyncClient) -> None:
        async def chunks():
            for _ in range(4):
                yield b"x" * 512

        response = await client.post("/documents/parse", content=chunks())
        assert response.status_code == 413
        assert "too large" in response.json()["detail"]
