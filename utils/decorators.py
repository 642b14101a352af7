from __future__ import annotations
from functools import wraps
from flask import request, g, abort
from utils.security import decode_token, TokenError
from models import storage
from models.user import User


def jwt_required():
    """Require a valid access token in the Authorization header.

    The authenticated user is exposed as ``g.current_user``.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                abort(401, description="Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            try:
                decoded = decode_token(token, expected_type="access")
            except TokenError as e:
                abort(401, description=str(e))

            session = storage.get_session()
            user = session.query(User).filter(User.email == decoded["email"]).first()
            if not user:
                abort(401, description="User not found")
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator
