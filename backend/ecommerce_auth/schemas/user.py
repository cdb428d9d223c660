"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from ecommerce_auth.models.user import UserRole

from .common import NAME_RULE, PaginationQuerySchema, RequestSchema, UTCDateTime


class UserSchema(Schema):
    """Public representation of a user.

    Only declared fields are dumped, so the password hash and the one-time
    tokens never leave the service.
    """

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    first_name = fields.String(required=True, data_key="firstName")
    last_name = fields.String(required=True, data_key="lastName")
    role = fields.String(required=True)
    is_active = fields.Boolean(required=True, data_key="isActive")
    is_email_verified = fields.Boolean(required=True, data_key="isEmailVerified")
    last_login = UTCDateTime(allow_none=True, data_key="lastLogin")
    created_at = UTCDateTime(allow_none=True, data_key="createdAt")
    updated_at = UTCDateTime(allow_none=True, data_key="updatedAt")


class ProfileUpdateSchema(RequestSchema):
    """Partial profile update; omitted names stay unchanged."""

    first_name = fields.String(load_default=None, data_key="firstName", validate=NAME_RULE)
    last_name = fields.String(load_default=None, data_key="lastName", validate=NAME_RULE)


class UserStatusSchema(RequestSchema):
    is_active = fields.Boolean(required=True, data_key="isActive")


class UserFilterSchema(PaginationQuerySchema):
    """Supported query parameters for the admin listing."""

    role = fields.String(load_default=None, validate=validate.OneOf([r.value for r in UserRole]))
    is_active = fields.Boolean(load_default=None, data_key="isActive")
