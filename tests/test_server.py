from __future__ import annotations

import json

from fastapi.testclient import TestClient

from config import ServerSettings, UpstreamConfig
from main import create_app


def make_client(tmp_path, stub, config):
    (tmp_path / "index.html").write_text("<h1>Landing</h1>", encoding="utf-8")
    (tmp_path / ".env").write_text("AIRTABLE_TOKEN=pat-secret\n", encoding="utf-8")
    settings = ServerSettings(static_dir=tmp_path)
    return TestClient(create_app(config=config, settings=settings, transport=stub.transport))


def test_submit_round_trip(tmp_path, stub, upstream_config):
    with make_client(tmp_path, stub, upstream_config) as client:
        res = client.post(
            "/api/submit",
            json={"Name": " Jane ", "WhatsApp Number": "+15550100", "Email": ""},
            headers={"Origin": "https://landing.example"},
        )
    assert res.status_code == 200
    assert res.json() == {"ok": True}
    assert res.headers["access-control-allow-origin"] == "https://landing.example"
    assert res.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert json.loads(stub.requests[0].content) == {"fields": {"Name": "Jane", "WhatsApp Number": "+15550100"}}


def test_preflight_and_method_not_allowed(tmp_path, stub):
    with make_client(tmp_path, stub, UpstreamConfig()) as client:
        preflight = client.options("/api/submit")
        wrong = client.get("/api/submit")
    assert preflight.status_code == 204
    assert preflight.content == b""
    assert preflight.headers["access-control-allow-origin"] == "*"
    assert wrong.status_code == 405
    assert wrong.json() == {"error": "Method not allowed"}
    assert stub.requests == []


def test_invalid_json_and_missing_config(tmp_path, stub, upstream_config):
    with make_client(tmp_path, stub, upstream_config) as client:
        res = client.post("/api/submit", content="{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    with make_client(tmp_path, stub, UpstreamConfig(base_id="appTEST")) as client:
        res = client.post("/api/submit", json={"Name": "Jane"})
    assert res.status_code == 500
    assert res.json() == {"error": "Server configuration error"}
    assert stub.requests == []


def test_health_reports_configuration(tmp_path, stub, upstream_config):
    with make_client(tmp_path, stub, upstream_config) as client:
        assert client.get("/api/health").json() == {"status": "ok", "airtable_configured": True}


def test_landing_pages_served_without_dotfiles(tmp_path, stub, upstream_config):
    with make_client(tmp_path, stub, upstream_config) as client:
        index = client.get("/")
        secret = client.get("/.env")
    assert index.status_code == 200
    assert "Landing" in index.text
    assert secret.status_code == 404
    assert "pat-secret" not in secret.text


def test_unsupported_methods_still_get_cors_headers(tmp_path, stub, upstream_config):
    with make_client(tmp_path, stub, upstream_config) as client:
        responses = {
            method: client.request(method, "/api/submit", headers={"Origin": "https://landing.example"})
            for method in ("HEAD", "TRACE", "FOO")
        }
    for method, res in responses.items():
        assert res.status_code == 405, method
        assert res.headers["access-control-allow-origin"] == "https://landing.example"
        assert res.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert responses["FOO"].json() == {"error": "Method not allowed"}
    assert stub.requests == []
