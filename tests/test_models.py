import pytest

from models import storage
from models.user import User
from utils.security import verify_password


def test_password_is_write_only():
    user = User(user_name="alice", email="a@x.com", password="secret1")
    assert verify_password("secret1", user.password_hash)
    with pytest.raises(AttributeError):
        user.password


def test_email_is_normalized():
    user = User(user_name="alice", email="  Alice@X.COM ", password="secret1")
    assert user.email == "alice@x.com"


def test_save_persists_user(app):
    with app.app_context():
        user = User(user_name="alice", email="a@x.com", password="secret1")
        user.save()
        stored = storage.get_session().query(User).one()
        assert stored is user
        assert stored.created_at is not None
