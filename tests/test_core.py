from __future__ import annotations
import pytest

from app import create_app
from extensions import db


@pytest.fixture()
def client():
    app = create_app("test")
    with app.app_context():
        db.create_all()
    # no app context held open: each request gets its own g and session
    yield app.test_client()
    with app.app_context():
        db.drop_all()


def test_health_ok(client):
    rv = client.get("/health")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["status"] == "ok"
    assert data["ts"].endswith("Z")


def test_unknown_route_is_json_404(client):
    rv = client.get("/no-such-thing")
    assert rv.status_code == 404
    assert "message" in rv.get_json()


def test_wrong_method_is_json_405(client):
    rv = client.delete("/health")
    assert rv.status_code == 405
    assert "message" in rv.get_json()


def test_api_prefix_is_configurable(monkeypatch):
    from config import TestConfig
    monkeypatch.setattr(TestConfig, "API_PREFIX", "/api")
    app = create_app("test")
    rules = {r.rule for r in app.url_map.iter_rules()}
    assert "/api/buildings" in rules
    assert "/api/login" in rules
    assert "/health" in rules
    assert "/buildings" not in rules
