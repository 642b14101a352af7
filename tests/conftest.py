"""
Shared pytest fixtures:
- app / client: Flask app on an in-memory SQLite store (TestingConfig)
- fake_uploader: stand-in for the Cloudinary uploader that records calls
"""
import os

import pytest

from auth_api import create_app
from models import storage
from models.user import User


class FakeUploader:
    """Records uploads; removes the local file like the real uploader does."""

    def __init__(self, url="https://res.cloudinary.com/test-cloud/image/upload/cat.png", error=None):
        self.url = url
        self.error = error
        self.calls = []
        self.existed = []

    def upload(self, local_path):
        self.calls.append(local_path)
        self.existed.append(os.path.exists(local_path))
        try:
            if self.error:
                raise self.error
            return self.url
        finally:
            if os.path.exists(local_path):
                os.remove(local_path)


@pytest.fixture
def app(tmp_path):
    app = create_app("testing")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_uploader(app):
    uploader = FakeUploader()
    app.extensions["media_uploader"] = uploader
    return uploader


@pytest.fixture
def register(client):
    def _register(userName="alice", email="a@x.com", password="secret1"):
        return client.post(
            "/api/v1/auth/register",
            json={"userName": userName, "email": email, "password": password},
        )
    return _register


def user_count(app):
    with app.app_context():
        return storage.get_session().query(User).count()
