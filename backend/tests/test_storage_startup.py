"""
Start-up storage tests.

When the configured database cannot be reached the app either falls back to
an in-memory database (and says so on /health) or refuses to start.
"""
import pytest

from tooladmin import create_app
from tooladmin.config import TestingConfig
from tooladmin.extensions import db

from conftest import auth_headers, get_auth_token


UNREACHABLE_URI = "sqlite:////nonexistent-dir/tooladmin/db.sqlite3"


class UnreachableFallbackConfig(TestingConfig):
    SQLALCHEMY_DATABASE_URI = UNREACHABLE_URI
    STORAGE_FALLBACK = "memory"


class UnreachableStrictConfig(TestingConfig):
    SQLALCHEMY_DATABASE_URI = UNREACHABLE_URI
    STORAGE_FALLBACK = "none"


@pytest.fixture
def degraded_app():
    app = create_app(UnreachableFallbackConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


def test_primary_storage_reports_healthy(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json["status"] == "healthy"
    assert resp.json["storage"] == "primary"


def test_unreachable_database_falls_back_to_memory(degraded_app):
    client = degraded_app.test_client()

    assert degraded_app.config["STORAGE_DEGRADED"] is True
    assert degraded_app.config["SQLALCHEMY_DATABASE_URI"] == "sqlite:///:memory:"

    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "degraded"
    assert resp.json["storage"] == "degraded"


def test_degraded_app_is_usable(degraded_app):
    client = degraded_app.test_client()
    config = degraded_app.config

    token = get_auth_token(client, config["DEFAULT_ADMIN_USERNAME"], config["DEFAULT_ADMIN_PASSWORD"])
    assert token

    resp = client.post("/api/categories", json={"name": "Fallback"}, headers=auth_headers(token))
    assert resp.status_code == 201


def test_unreachable_database_without_fallback_refuses_to_start():
    with pytest.raises(RuntimeError, match="Database unreachable"):
        create_app(UnreachableStrictConfig)
