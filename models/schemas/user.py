from marshmallow import Schema, fields, pre_load, validate, EXCLUDE


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _required(name):
    """Error messages for a required, non-empty field."""
    message = f"{name} required"
    return {
        "required": message,
        "null": message,
        "validator_failed": message,
    }


class UserCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    userName = fields.String(
        required=True,
        validate=validate.Length(min=1, error="username required"),
        error_messages=_required("username"),
    )
    email = fields.Email(
        required=True,
        error_messages={**_required("email"), "invalid": "invalid email"},
    )
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=1, error="password required"),
        error_messages=_required("password"),
    )

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
            # an empty email is "missing", not "malformed"
            if data["email"] == "":
                data.pop("email")
        return data


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(
        required=True,
        validate=validate.Length(min=1, error="email required"),
        error_messages=_required("email"),
    )
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=1, error="password required"),
        error_messages=_required("password"),
    )

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserOutSchema(Schema):
    userName = fields.String(attribute="user_name")
    email = fields.String()


class UserWithIdOutSchema(UserOutSchema):
    id = fields.String()
