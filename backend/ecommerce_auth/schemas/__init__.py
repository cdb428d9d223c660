"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResponseSchema,
    ChangePasswordSchema,
    ForgotPasswordSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenPairSchema,
)
from .common import MetaSchema, PaginationQuerySchema, RequestSchema
from .user import ProfileUpdateSchema, UserFilterSchema, UserSchema, UserStatusSchema

__all__ = [
    "AuthResponseSchema",
    "ChangePasswordSchema",
    "ForgotPasswordSchema",
    "LoginSchema",
    "LogoutSchema",
    "RefreshSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "TokenPairSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "RequestSchema",
    "ProfileUpdateSchema",
    "UserFilterSchema",
    "UserSchema",
    "UserStatusSchema",
]
