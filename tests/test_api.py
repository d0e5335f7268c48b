"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from segmerge.api import create_app
from segmerge.config import AppConfig, AuthConfig, ServerConfig

SAMPLE_HTML = (
    '<div><h1>Welcome</h1><p>Read <a href="/doc">this</a> guide.</p></div>'
)
TOKEN = "secret-token"


def _client(**overrides: object) -> TestClient:
    return TestClient(create_app(AppConfig(**overrides)))  # type: ignore[arg-type]


@pytest.fixture
def client() -> TestClient:
    return _client()


@pytest.fixture
def auth_client() -> TestClient:
    return _client(auth=AuthConfig(api_token=TOKEN))


def _extract_ids(client: TestClient, html: str = SAMPLE_HTML) -> list[str]:
    response = client.post("/api/extract", json={"html": html})
    assert response.status_code == 200
    return [s["id"] for s in response.json()["segments"]]


class TestServiceEndpoints:
    def test_healthz(self, client: TestClient) -> None:
        response = client.get("/healthz")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"] == "1.0.0"
        assert body["uptime"] >= 0

    def test_service_info(self, client: TestClient) -> None:
        body = client.get("/").json()
        assert body["name"] == "segmerge"
        assert "translation" in body["description"]

    def test_version_header(self, client: TestClient) -> None:
        assert client.get("/healthz").headers["X-API-Version"] == "1.0.0"

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "NOT_FOUND",
            "message": "Route GET /nope not found",
        }


class TestExtractEndpoint:
    def test_extract(self, client: TestClient) -> None:
        response = client.post("/api/extract", json={"html": SAMPLE_HTML})
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["segments"][0]["tag"] == "h1"
        assert body["segments"][0]["path"] == "html[0].body[0].div[0].h1[0]"
        assert body["segments"][1]["text"] == 'Read <a href="/doc">this</a> guide.'

    def test_camel_case_options(self, client: TestClient) -> None:
        response = client.post(
            "/api/extract",
            json={
                "html": '<p class="skip">No</p><p title="T">Yes</p>',
                "options": {"ignoredClasses": ["skip"], "extractAttributes": ["title"]},
            },
        )
        segments = response.json()["segments"]
        assert [s["text"] for s in segments] == ["Yes"]
        assert segments[0]["attributes"] == {"title": "T"}

    def test_missing_html(self, client: TestClient) -> None:
        response = client.post("/api/extract", json={})
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"][0]["path"] == "html"

    def test_blank_html(self, client: TestClient) -> None:
        response = client.post("/api/extract", json={"html": "   "})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_STRUCTURE"

    def test_invalid_json(self, client: TestClient) -> None:
        response = client.post(
            "/api/extract",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_JSON"

    def test_payload_too_large(self) -> None:
        client = _client(server=ServerConfig(max_payload_bytes=64))
        response = client.post("/api/extract", json={"html": "<p>" + "x" * 200 + "</p>"})
        assert response.status_code == 413
        assert response.json()["error"] == "PAYLOAD_TOO_LARGE"

    def test_unexpected_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def boom(*args: object, **kwargs: object) -> None:
            raise RuntimeError("kaboom")

        monkeypatch.setattr("segmerge.service.extract", boom)
        client = TestClient(create_app(AppConfig()), raise_server_exceptions=False)
        response = client.post("/api/extract", json={"html": "<p>x</p>"})
        assert response.status_code == 500
        assert response.json()["error"] == "INTERNAL_ERROR"
        assert response.json()["message"] == "kaboom"


class TestMergeEndpoint:
    def test_merge_without_token_outside_production(self, client: TestClient) -> None:
        ids = _extract_ids(client)
        response = client.post(
            "/api/merge",
            json={"html": SAMPLE_HTML, "translations": [{"id": ids[0], "text": "欢迎"}]},
        )
        assert response.status_code == 200
        body = response.json()
        assert "<h1>欢迎</h1>" in body["html"]
        assert body["applied_count"] == 1
        assert body["unresolved_ids"] == []

    def test_production_without_token_refused(self) -> None:
        client = _client(server=ServerConfig(environment="production"))
        response = client.post(
            "/api/merge",
            json={"html": SAMPLE_HTML, "translations": [{"id": "aA==", "text": "x"}]},
        )
        assert response.status_code == 403
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_missing_authorization(self, auth_client: TestClient) -> None:
        response = auth_client.post(
            "/api/merge",
            json={"html": SAMPLE_HTML, "translations": [{"id": "aA==", "text": "x"}]},
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Authorization header required"

    def test_wrong_token(self, auth_client: TestClient) -> None:
        response = auth_client.post(
            "/api/merge",
            json={"html": SAMPLE_HTML, "translations": [{"id": "aA==", "text": "x"}]},
            headers={"Authorization": "Bearer wrong"},
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Invalid or expired token"

    def test_valid_token(self, auth_client: TestClient) -> None:
        ids = _extract_ids(auth_client)
        response = auth_client.post(
            "/api/merge",
            json={
                "html": SAMPLE_HTML,
                "translations": [{"id": ids[1], "text": "阅读本指南。"}],
                "options": {"mode": "append"},
            },
            headers={"Authorization": f"Bearer {TOKEN}"},
        )
        assert response.status_code == 200
        assert '<span class="segmerge-translation"><br/>阅读本指南。</span>' in response.json()["html"]

    def test_unbalanced_translation(self, client: TestClient) -> None:
        ids = _extract_ids(client)
        response = client.post(
            "/api/merge",
            json={"html": SAMPLE_HTML, "translations": [{"id": ids[0], "text": "<strong>欢迎"}]},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "INVALID_STRUCTURE"
        assert body["details"] == [{"id": ids[0], "unmatched_tags": ["strong"]}]

    def test_strict_mode_missing_segment(self, client: TestClient) -> None:
        missing = _extract_ids(client, "<ul><li>a</li><li>b</li></ul>")[1]
        response = client.post(
            "/api/merge",
            json={
                "html": SAMPLE_HTML,
                "translations": [{"id": missing, "text": "x"}],
                "options": {"strictMode": True},
            },
        )
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "MISSING_SEGMENTS"
        assert body["details"] == [missing]

    def test_non_strict_reports_missing(self, client: TestClient) -> None:
        response = client.post(
            "/api/merge",
            json={"html": SAMPLE_HTML, "translations": [{"id": "bogus", "text": "x"}]},
        )
        assert response.status_code == 200
        assert response.json()["unresolved_ids"] == ["bogus"]
        assert response.json()["applied_count"] == 0

    def test_empty_translations_rejected(self, client: TestClient) -> None:
        response = client.post("/api/merge", json={"html": SAMPLE_HTML, "translations": []})
        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"
