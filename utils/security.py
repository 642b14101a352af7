"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Access / refresh JWT creation and verification via PyJWT

Access and refresh tokens carry the same identity claim (email) but are
signed with different secrets, so one can never be replayed as the other.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError

from flask import current_app

ph = PasswordHasher()

TOKEN_SECRETS = {
    "access": ("ACCESS_JWT_SECRET", "ACCESS_TOKEN_EXPIRES"),
    "refresh": ("REFRESH_JWT_SECRET", "REFRESH_TOKEN_EXPIRES"),
}


class TokenError(Exception):
    """Raised when a JWT is expired, forged, malformed or of the wrong type."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2 hash (constant time).
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _create_token(email: str, token_type: str) -> str:
    secret_key, expires_key = TOKEN_SECRETS[token_type]
    issued = _now()
    payload = {
        "email": email,
        "type": token_type,
        "iat": int(issued.timestamp()),
        "exp": int((issued + current_app.config[expires_key]).timestamp()),
    }
    return jwt.encode(payload, current_app.config[secret_key], algorithm=current_app.config["JWT_ALGORITHM"])


def create_access_token(email: str) -> str:
    """Short-lived token authorizing API calls."""
    return _create_token(email, "access")


def create_refresh_token(email: str) -> str:
    """Long-lived token used only to mint new access tokens."""
    return _create_token(email, "refresh")


def decode_token(token: str, expected_type: str = "access") -> Dict[str, Any]:
    """
    Decode and validate a JWT against the secret of its expected type.
    Raises TokenError on invalid signature, expiry, missing claims or wrong type.
    """
    secret_key, _ = TOKEN_SECRETS[expected_type]
    try:
        decoded = jwt.decode(
            token,
            current_app.config[secret_key],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token expired")
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise TokenError("Wrong token type")
    if not decoded.get("email"):
        raise TokenError("Token has no email claim")
    return decoded
