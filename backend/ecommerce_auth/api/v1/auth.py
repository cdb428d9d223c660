"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint

from ecommerce_auth.api.deps import (
    current_identity,
    json_response,
    load_json,
    require_auth,
    timing,
)
from ecommerce_auth.core.container import get_container
from ecommerce_auth.schemas import (
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
from ecommerce_auth.services.auth.dto import ChangePasswordIn, LoginIn, LogoutIn, RegisterIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
forgot_schema = ForgotPasswordSchema()
reset_schema = ResetPasswordSchema()
change_password_schema = ChangePasswordSchema()
auth_response_schema = AuthResponseSchema()
token_schema = TokenPairSchema()

FORGOT_PASSWORD_MESSAGE = "If the email exists, a reset link has been sent"


@bp.post("/register")
@timing
def register():
    """Create an account and return the user with a fresh token pair."""

    data = load_json(register_schema)
    result = get_container().auth.register(RegisterIn(**data))
    return json_response(
        auth_response_schema.dump(result),
        message="User registered successfully",
        status=201,
    )


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = load_json(login_schema)
    result = get_container().auth.login(LoginIn(**data))
    return json_response(auth_response_schema.dump(result), message="Login successful")


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a new pair."""

    data = load_json(refresh_schema)
    tokens = get_container().auth.refresh(data["refresh_token"])
    return json_response({"tokens": token_schema.dump(tokens)}, message="Token refreshed")


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the caller's access token and, when given, its refresh token."""

    data = load_json(logout_schema)
    identity = current_identity()
    get_container().auth.logout(
        LogoutIn(access_token=identity.token, refresh_token=data["refresh_token"])
    )
    return json_response(message="Logged out successfully")


@bp.post("/forgot-password")
@timing
def forgot_password():
    data = load_json(forgot_schema)
    result = get_container().auth.forgot_password(data["email"])
    if result.reset_token is not None:
        return json_response({"resetToken": result.reset_token}, message=FORGOT_PASSWORD_MESSAGE)
    return json_response(message=FORGOT_PASSWORD_MESSAGE)


@bp.post("/reset-password")
@timing
def reset_password():
    data = load_json(reset_schema)
    get_container().auth.reset_password(data["token"], data["password"])
    return json_response(message="Password reset successful")


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = load_json(change_password_schema)
    get_container().auth.change_password(
        ChangePasswordIn(
            user_id=current_identity().user_id,
            current_password=data["current_password"],
            new_password=data["new_password"],
        )
    )
    return json_response(message="Password changed successfully")


@bp.get("/verify-email/<token>")
@timing
def verify_email(token: str):
    get_container().auth.verify_email(token)
    return json_response(message="Email verified successfully")
