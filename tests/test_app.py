import pytest

from auth_api import create_app
from auth_api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from models import storage
from models.user import User


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_root(client):
    resp = client.get("/")
    assert resp.get_json()["docs"] == "/apidocs/"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["error"] == "NOT_FOUND"
    assert body["status"] == 404


def test_unexpected_error_is_server_error(app):
    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    resp = app.test_client().get("/boom")
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "server error"


def test_integrity_error_maps_to_conflict(app):
    @app.post("/dup")
    def dup():
        storage.new(User(user_name="a", email="dup@x.com", password="pw"))
        storage.new(User(user_name="b", email="dup@x.com", password="pw"))
        storage.save()

    resp = app.test_client().post("/dup")
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "user already exists"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("prod", ProductionConfig),
        ("Production", ProductionConfig),
        ("test", TestingConfig),
        ("dev", DevelopmentConfig),
    ],
)
def test_get_config(name, expected):
    assert get_config(name) is expected


def test_get_config_from_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_config(None) is TestingConfig


def test_app_wires_uploader_from_config():
    app = create_app("testing")
    uploader = app.extensions["media_uploader"]
    assert uploader.cloud_name == "test-cloud"
    storage.close()
