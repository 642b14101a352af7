"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/logout
- POST|GET /auth/refresh
- GET  /auth/me

The implementation:
- Uses argon2 for password hashing (via utils.security, applied by the User model)
- Issues short-lived access tokens and long-lived refresh tokens (HS256 JWTs,
  each kind signed with its own secret)
- Delivers the refresh token in an HTTP-only cookie and in the response body
- Logout only clears the cookie; issued tokens stay valid until they expire
"""
from __future__ import annotations

import logging
from flask import Blueprint, request, jsonify, g, abort, current_app
from marshmallow import ValidationError

from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema, UserLoginSchema, UserOutSchema, UserWithIdOutSchema

from auth_api.errors import first_error_message
from utils.decorators import jwt_required
from utils.security import (
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()
user_with_id_out_schema = UserWithIdOutSchema()


def _load(schema, order):
    payload = request.get_json(silent=True) or {}
    try:
        return schema.load(payload)
    except ValidationError as err:
        abort(400, description=first_error_message(err, order))


def _find_user(email: str) -> User | None:
    session = storage.get_session()
    return session.query(User).filter(User.email == email).first()


def _set_refresh_cookie(response, refresh_token: str):
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        refresh_token,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()),
        httponly=True,
        secure=current_app.config["REFRESH_COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


@bp.post("/register")
def register():
    """
    Register a new user and log them in.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [userName, email, password]
          properties:
            userName: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: Registered; returns tokens and sets the refreshToken cookie
      400:
        description: Missing or invalid field
      409:
        description: User already exists
    """
    data = _load(user_create_schema, ("userName", "email", "password"))

    if _find_user(data["email"]):
        abort(409, description="user already exists")

    user = User(user_name=data["userName"], email=data["email"], password=data["password"])
    user.save()
    logger.info("Registered user %s", user.id)

    access_token = create_access_token(user.email)
    refresh_token = create_refresh_token(user.email)

    response = jsonify(
        {
            "message": "user registered and logged in successfully",
            "accessToken": access_token,
            "refreshToken": refresh_token,
            "data": user_out_schema.dump(user),
        }
    )
    return _set_refresh_cookie(response, refresh_token), 200


@bp.post("/login")
def login():
    """
    Login: return accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens and sets the refreshToken cookie)
      400:
        description: Missing field or incorrect password
      404:
        description: No user with this email
    """
    data = _load(user_login_schema, ("email", "password"))

    user = _find_user(data["email"])
    if not user:
        abort(404, description="no user found")
    if not verify_password(data["password"], user.password_hash):
        logger.warning("Failed login for user %s", user.id)
        abort(400, description="incorrect password")

    access_token = create_access_token(user.email)
    refresh_token = create_refresh_token(user.email)

    response = jsonify(
        {
            "message": "user logged in successfully",
            "accessToken": access_token,
            "refreshToken": refresh_token,
            "data": user_with_id_out_schema.dump(user),
        }
    )
    return _set_refresh_cookie(response, refresh_token), 200


@bp.post("/logout")
def logout():
    """
    Logout: clears the refreshToken cookie
    ---
    tags:
      - Auth
    responses:
      200:
        description: Cookie cleared
    """
    response = jsonify({"message": "user logout successfully"})
    response.delete_cookie(current_app.config["REFRESH_COOKIE_NAME"], httponly=True)
    return response, 200


@bp.route("/refresh", methods=["GET", "POST"])
def refresh():
    """
    Use the refresh token (cookie or body) to obtain a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: false
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns accesstoken)
      401:
        description: Missing, expired or invalid refresh token
      404:
        description: Token user no longer exists
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"]) or payload.get("refreshToken")
    if not token:
        abort(401, description="no refresh token found!")

    try:
        decoded = decode_token(token, expected_type="refresh")
    except TokenError as e:
        logger.info("Rejected refresh token: %s", e)
        abort(401, description="invalid refresh token")

    user = _find_user(decoded["email"])
    if not user:
        abort(404, description="invalid token")

    return jsonify(
        {
            "message": "access token generated",
            "accesstoken": create_access_token(user.email),
        }
    ), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": user_with_id_out_schema.dump(g.current_user)}), 200
