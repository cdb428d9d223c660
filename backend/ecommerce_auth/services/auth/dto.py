from __future__ import annotations

from dataclasses import dataclass

from ecommerce_auth.services._shared.dto import UserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: User email (normalized by the entity).
    :type email: str
    :param password: Raw password (6-128 characters, validated upstream).
    :type password: str
    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param role: Requested role; ``None`` means ``customer``.
    :type role: str | None
    """

    email: str
    password: str
    first_name: str
    last_name: str
    role: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param access_token: Bearer token of the current request.
    :type access_token: str
    :param refresh_token: Refresh token to invalidate, when supplied.
    :type refresh_token: str | None
    """

    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    user_id: int
    current_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AuthOut:
    """User plus the token pair issued by register/login."""

    user: UserOut
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class ForgotPasswordOut:
    """
    Result of ``forgot_password``.

    :param reset_token: Only populated when the deployment echoes reset
        tokens (development); ``None`` otherwise.
    """

    reset_token: str | None = None


# ------------------------ Config DTO --------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Behavioral knobs for :class:`~ecommerce_auth.services.auth.service.AuthService`.

    :param password_hash_method: Werkzeug method string with work factor.
    :type password_hash_method: str
    :param reset_token_lifetime: Seconds a password-reset token stays valid.
    :type reset_token_lifetime: int
    :param expose_reset_token: Echo reset tokens to the caller (development).
    :type expose_reset_token: bool
    """

    password_hash_method: str = "pbkdf2:sha256:600000"
    reset_token_lifetime: int = 60 * 60
    expose_reset_token: bool = False

    @classmethod
    def from_config(cls, config) -> AuthSettings:
        return cls(
            password_hash_method=config.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000"),
            reset_token_lifetime=int(config.get("PASSWORD_RESET_EXPIRES", 60 * 60)),
            expose_reset_token=bool(config.get("EXPOSE_RESET_TOKEN", False)),
        )
