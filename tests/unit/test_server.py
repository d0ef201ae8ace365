from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from voice_trigger_workflows.server.app import create_app
from voice_trigger_workflows.server.config import ServerSettings
from voice_trigger_workflows.server.handler import load_handler
from voice_trigger_workflows.widget.submission import FulfillmentResponse, classify_response


@pytest.fixture
def public_dir(monkeypatch, tmp_path: Path) -> Path:
    public = tmp_path / "public"
    monkeypatch.setenv("FULFILLMENT_PUBLIC_DIR", str(public))
    return public


def test_default_handler_acknowledges(public_dir: Path) -> None:
    client = TestClient(create_app())

    resp = client.post("/", json={"interactionId": "int-1", "callbackNumber": "5550100"})

    assert resp.status_code == 200
    assert resp.json() == {"retval": 0, "retmsg": "Request received"}
    assert classify_response(resp.json()).ok


def test_custom_handler_receives_merged_payload(public_dir: Path) -> None:
    seen: list[dict[str, object]] = []

    def handler(payload: dict[str, object]) -> FulfillmentResponse:
        seen.append(payload)
        return FulfillmentResponse(retval=2, retmsg="No agents")

    client = TestClient(create_app(handler=handler))
    resp = client.post("/", json={"a": "1", "b": {"nested": True}})

    assert resp.json() == {"retval": 2, "retmsg": "No agents"}
    assert seen == [{"a": "1", "b": {"nested": True}}]


def test_handler_errors_become_failure_responses(public_dir: Path) -> None:
    def handler(_payload: dict[str, object]) -> FulfillmentResponse:
        raise RuntimeError("backend down")

    client = TestClient(create_app(handler=handler))
    resp = client.post("/", json={})

    assert resp.status_code == 500
    assert resp.json() == {"retval": -1, "retmsg": "backend down"}


def test_non_object_body_is_rejected(public_dir: Path) -> None:
    client = TestClient(create_app())
    assert client.post("/", json=["not", "an", "object"]).status_code == 422


def test_handler_is_loaded_from_settings(monkeypatch, public_dir: Path) -> None:
    monkeypatch.setenv("FULFILLMENT_HANDLER", "voice_trigger_workflows.server.handler:nope")
    with pytest.raises(ValueError):
        create_app()

    with pytest.raises(ValueError):
        load_handler("no-colon")


def test_public_assets_are_served(public_dir: Path) -> None:
    public_dir.mkdir()
    (public_dir / "widget.js").write_text("export {};\n", encoding="utf-8")

    client = TestClient(create_app())
    resp = client.get("/public/widget.js")

    assert resp.status_code == 200
    assert "export" in resp.text


def test_cors_allows_any_origin_by_default(public_dir: Path) -> None:
    client = TestClient(create_app())
    resp = client.post(
        "/", json={}, headers={"Origin": "https://desktop.example.com"}
    )
    assert resp.headers["access-control-allow-origin"] == "*"


def test_server_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("FULFILLMENT_CORS_ORIGINS", "https://a.example.com, https://b.example.com")

    settings = ServerSettings(_env_file=None)

    assert settings.port == 9090
    assert settings.parsed_cors_origins() == ["https://a.example.com", "https://b.example.com"]


def test_server_settings_default_port(monkeypatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    assert ServerSettings(_env_file=None).port == 8080
