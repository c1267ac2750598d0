import time
import pytest
from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient

from storefront.app_setup.exceptions import register_exception_handlers
from storefront.utils.rate_limit import optional_rate_limit, rate_limit_health_info, humanize_window


def _make_app(times=2, seconds=60, scope=None):
    app = FastAPI()
    register_exception_handlers(app)
    limit = optional_rate_limit(times, seconds, scope=scope, message="Slow down")

    @app.get("/limitedA", dependencies=[Depends(limit)])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(limit)])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=900))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    r3 = client.get("/limitedA")
    assert r3.status_code == 429
    assert r3.json() == {"error": "Slow down", "retryAfter": "15 minutes"}
    assert 0 < int(r3.headers["Retry-After"]) <= 901


def test_rate_limit_is_per_path_without_scope(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    # chemin B indépendant de A
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedB").status_code == 429


def test_rate_limit_scope_is_shared_across_paths(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60, scope="global"))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedA").status_code == 429


def test_rate_limit_resets_after_window(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=1))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429

    time.sleep(1.1)
    assert client.get("/limitedA").status_code == 200


def test_rate_limit_disabled_flag_bypasses_limit():
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)

    for _ in range(3):
        assert client.get("/limitedA").status_code == 200


def test_rate_limit_without_backend_lets_requests_through():
    # Ni fallback, ni Redis initialisé: pas de 429
    client = TestClient(_make_app(times=1, seconds=60))
    for _ in range(3):
        assert client.get("/limitedA").status_code == 200


def test_rate_limit_health_info(monkeypatch):
    app = _make_app()
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    info = client.get("/rl_info").json()
    assert info["enabled"] is True
    assert info["ready"] is False
    assert info["backend"] is None

    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    info2 = client.get("/rl_info").json()
    assert info2["ready"] is True
    assert info2["backend"] == "memory"


@pytest.mark.parametrize("seconds,expected", [(900, "15 minutes"), (60, "1 minute"), (3600, "1 hour"), (45, "45 seconds")])
def test_humanize_window(seconds, expected):
    assert humanize_window(seconds) == expected
