"""Integration tests for the FastAPI REST API."""

from __future__ import annotations

import json

import pytest
from httpx import ASGITransport, AsyncClient

from yamltools.api.app import create_app
from yamltools.api.deps import init_document_service, reset_document_service
from yamltools.service.document_service import DocumentService
from yamltools.settings import Settings
from tests.conftest import SAMPLE_WITH_ISSUES, SAMPLE_YAML


@pytest.fixture
def app():
    settings = Settings(_env_file=None)
    app = create_app(settings=settings)
    # Manually init DocumentService (ASGITransport doesn't trigger lifespan)
    init_document_service(DocumentService.from_settings(settings))
    yield app
    reset_document_service()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health & Reference
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    async def test_timing_header(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert "x-request-duration-ms" in response.headers


class TestReferenceEndpoint:
    async def test_language_reference(self, client: AsyncClient) -> None:
        response = await client.get("/reference/language")
        assert response.status_code == 200
        assert "Mappings" in response.json()["reference"]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestParseEndpoint:
    async def test_parse(self, client: AsyncClient) -> None:
        response = await client.post("/documents/parse", json={"content": SAMPLE_YAML})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["age"] == 30
        assert data["address"]["zipcode"] == "10001"
        assert data["hobbies"] == ["reading", "swimming", "coding"]

    async def test_parse_error(self, client: AsyncClient) -> None:
        response = await client.post("/documents/parse", json={"content": "a\nb: 1\n"})
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error"] == "PARSE_ERROR"
        assert detail["line"] == 1
        assert detail["suggestion"].startswith("Run validation first")

    async def test_missing_content_field(self, client: AsyncClient) -> None:
        response = await client.post("/documents/parse", json={})
        assert response.status_code == 422


class TestValidateEndpoint:
    async def test_valid_with_warnings(self, client: AsyncClient) -> None:
        response = await client.post(
            "/documents/validate", json={"content": SAMPLE_WITH_ISSUES}
        )
        assert response.status_code == 200
        report = response.json()
        assert report["is_valid"] is True
        assert report["errors"] == []
        kinds = {w["kind"] for w in report["warnings"]}
        assert kinds == {"version_quoting", "boolean_interpretation", "date_format"}
        assert report["statistics"]["warning_count"] == 3

    async def test_invalid_still_200(self, client: AsyncClient) -> None:
        response = await client.post("/documents/validate", json={"content": "a:\n\tb: 1\n"})
        assert response.status_code == 200
        report = response.json()
        assert report["is_valid"] is False
        error = report["errors"][0]
        assert error["severity"] == "error"
        assert error["kind"] == "indentation"
        assert error["line"] == 2


class TestFormatEndpoint:
    async def test_format(self, client: AsyncClient) -> None:
        response = await client.post(
            "/documents/format", json={"content": "# c\nname:  x\nxs:\n    - 1\n"}
        )
        assert response.status_code == 200
        assert response.json()["content"] == "name: x\nxs:\n  - 1\n"

    async def test_format_error(self, client: AsyncClient) -> None:
        response = await client.post("/documents/format", json={"content": "- orphan\n"})
        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "FORMAT_ERROR"


class TestConvertEndpoint:
    async def test_convert(self, client: AsyncClient) -> None:
        response = await client.post("/documents/convert", json={"content": "enabled: true\n"})
        assert response.status_code == 200
        assert response.json()["json_text"] == '{\n  "enabled": true\n}'

    async def test_convert_sample(self, client: AsyncClient) -> None:
        response = await client.post("/documents/convert", json={"content": SAMPLE_YAML})
        assert json.loads(response.json()["json_text"])["name"] == "John Doe"

    async def test_convert_error(self, client: AsyncClient) -> None:
        response = await client.post(
            "/documents/convert", json={"content": "items:\n  - a\n  b: 1\n"}
        )
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error"] == "CONVERT_ERROR"
        assert detail["line"] == 3


class TestServiceNotInitialised:
    async def test_runtime_error_without_service(self) -> None:
        app = create_app(settings=Settings(_env_file=None))
        reset_document_service()
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/documents/parse", json={"content": "a: 1\n"})
        assert response.status_code == 500
