"""Authentication-related Marshmallow schemas (camelCase on the wire)."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from ecommerce_auth.models.user import UserRole

from .common import NAME_RULE, RequestSchema, dotted_domain
from .user import UserSchema

PASSWORD_RULE = validate.Length(min=6, max=128)
ROLE_CHOICES = [r.value for r in UserRole]


class RegisterSchema(RequestSchema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=[validate.Length(max=254), dotted_domain])
    password = fields.String(required=True, validate=PASSWORD_RULE)
    first_name = fields.String(required=True, data_key="firstName", validate=NAME_RULE)
    last_name = fields.String(required=True, data_key="lastName", validate=NAME_RULE)
    role = fields.String(load_default=None, validate=validate.OneOf(ROLE_CHOICES))


class LoginSchema(RequestSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(RequestSchema):
    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )


class LogoutSchema(RequestSchema):
    refresh_token = fields.String(load_default=None, data_key="refreshToken")


class ForgotPasswordSchema(RequestSchema):
    email = fields.Email(required=True, validate=validate.Length(max=254))


class ResetPasswordSchema(RequestSchema):
    token = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, validate=PASSWORD_RULE)


class ChangePasswordSchema(RequestSchema):
    current_password = fields.String(
        required=True, data_key="currentPassword", validate=validate.Length(min=1, max=128)
    )
    new_password = fields.String(required=True, data_key="newPassword", validate=PASSWORD_RULE)


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class AuthResponseSchema(Schema):
    """``{user, tokens}`` returned by register and login."""

    user = fields.Nested(UserSchema, required=True)
    tokens = fields.Nested(TokenPairSchema, required=True)
