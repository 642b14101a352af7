from datetime import timedelta

import jwt
import pytest

from utils.security import (
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify_password():
    pw_hash = hash_password("secret1")
    assert pw_hash != "secret1"
    assert verify_password("secret1", pw_hash)
    assert not verify_password("secret2", pw_hash)


def test_verify_password_with_corrupt_hash():
    assert not verify_password("secret1", "not-a-hash")


def test_access_token_round_trip(app):
    with app.app_context():
        decoded = decode_token(create_access_token("a@x.com"), expected_type="access")
    assert decoded["email"] == "a@x.com"
    assert decoded["type"] == "access"
    assert decoded["exp"] - decoded["iat"] == 6 * 60 * 60


def test_refresh_token_lifetime(app):
    with app.app_context():
        decoded = decode_token(create_refresh_token("a@x.com"), expected_type="refresh")
    assert decoded["exp"] - decoded["iat"] == 7 * 24 * 60 * 60


def test_lifetimes_follow_config(app):
    app.config["ACCESS_TOKEN_EXPIRES"] = timedelta(minutes=5)
    with app.app_context():
        decoded = decode_token(create_access_token("a@x.com"))
    assert decoded["exp"] - decoded["iat"] == 300


def test_decode_with_wrong_kind_fails(app):
    with app.app_context():
        access = create_access_token("a@x.com")
        refresh = create_refresh_token("a@x.com")
        with pytest.raises(TokenError):
            decode_token(access, expected_type="refresh")
        with pytest.raises(TokenError):
            decode_token(refresh, expected_type="access")


def test_decode_rejects_type_mismatch_with_right_secret(app):
    token = jwt.encode(
        {"email": "a@x.com", "type": "access", "iat": 1, "exp": 9999999999},
        app.config["REFRESH_JWT_SECRET"],
        algorithm="HS256",
    )
    with app.app_context():
        with pytest.raises(TokenError, match="Wrong token type"):
            decode_token(token, expected_type="refresh")


def test_decode_expired(app):
    token = jwt.encode(
        {"email": "a@x.com", "type": "access", "iat": 1, "exp": 2},
        app.config["ACCESS_JWT_SECRET"],
        algorithm="HS256",
    )
    with app.app_context():
        with pytest.raises(TokenError, match="expired"):
            decode_token(token)


def test_decode_requires_email(app):
    token = jwt.encode(
        {"type": "access", "iat": 1, "exp": 9999999999},
        app.config["ACCESS_JWT_SECRET"],
        algorithm="HS256",
    )
    with app.app_context():
        with pytest.raises(TokenError):
            decode_token(token)
