from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from ecommerce_auth.models.base import utcnow
from ecommerce_auth.models.user import User, UserRole
from ecommerce_auth.services._shared.base import BaseService, ReadOnlyUowFactory, UowFactory
from ecommerce_auth.services._shared.dto import UserOut
from ecommerce_auth.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    violates,
)
from ecommerce_auth.services._shared.ports import EmailSender, InvalidTokenError
from ecommerce_auth.services.auth.dto import (
    AuthOut,
    AuthSettings,
    ChangePasswordIn,
    ForgotPasswordOut,
    LoginIn,
    LogoutIn,
    RegisterIn,
    TokenPairOut,
)
from ecommerce_auth.services.sessions.registry import SessionRegistry

log = logging.getLogger(__name__)


def _email_taken() -> ConflictError:
    return ConflictError("Email already registered", code="EMAIL_EXISTS")


def _invalid_refresh() -> AuthenticationError:
    return AuthenticationError("Invalid refresh token", code="INVALID_REFRESH_TOKEN")


class AuthService(BaseService):
    """
    Authentication lifecycle service.

    Covers registration, login, refresh rotation, logout, the password
    recovery flows and email verification. Tokens are issued and tracked by a
    :class:`SessionRegistry`; users are read and written through units of work.
    """

    def __init__(
        self,
        *,
        sessions: SessionRegistry,
        email_sender: EmailSender,
        settings: AuthSettings | None = None,
        uow_factory: UowFactory | None = None,
        ro_uow_factory: ReadOnlyUowFactory | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param sessions: Token issuance, refresh registry and blacklist.
        :param email_sender: Transactional mail port.
        :param settings: Hashing method, reset lifetime and exposure flag.
        """
        super().__init__(uow_factory=uow_factory, ro_uow_factory=ro_uow_factory)
        self.sessions = sessions
        self.mailer = email_sender
        self.settings = settings or AuthSettings()

    # ------------------------------------------------------------------ #
    # Registration / login
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthOut:
        """
        Create a customer (or the requested role) and issue a token pair.

        :raises ConflictError: ``EMAIL_EXISTS`` when the email is taken.
        :raises InvalidRequestError: On an unknown role.
        """
        try:
            role = UserRole(dto.role) if dto.role else UserRole.CUSTOMER
        except ValueError as exc:
            raise InvalidRequestError(
                "Validation failed", details={"role": [f"Unknown role: {dto.role}"]}
            ) from exc

        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    raise _email_taken()
                user = User(
                    email=dto.email,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                    role=role,
                )
                user.set_password(dto.password, method=self.settings.password_hash_method)
                verification_token = user.generate_email_verification_token()
                uow.users.add(user)
                out = UserOut.from_model(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration of the same email
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise _email_taken() from exc
            raise

        log.info("User registered", extra={"user_id": out.id})
        self.mailer.send_verification_email(
            to=out.email, first_name=out.first_name, token=verification_token
        )
        return AuthOut(user=out, tokens=self.sessions.issue_pair(out))

    def login(self, dto: LoginIn) -> AuthOut:
        """
        Verify credentials and issue a token pair.

        Credentials are checked before the active flag, so a wrong password
        on a deactivated account still reads as ``INVALID_CREDENTIALS``.

        :raises AuthenticationError: ``INVALID_CREDENTIALS``.
        :raises AuthorizationError: ``ACCOUNT_DEACTIVATED``.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None or not user.verify_password(dto.password):
                raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")
            if not user.is_active:
                raise AuthorizationError("Account is deactivated", code="ACCOUNT_DEACTIVATED")
            user.mark_logged_in()
            uow.users.flush()
            out = UserOut.from_model(user)

        log.info("User logged in", extra={"user_id": out.id})
        return AuthOut(user=out, tokens=self.sessions.issue_pair(out))

    # ------------------------------------------------------------------ #
    # Session lifecycle
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        The presented token must verify, be recorded in the registry for the
        same user, and be removed by *this* call; a concurrent rotation of the
        same token therefore fails for all but one caller.

        :raises AuthenticationError: ``INVALID_REFRESH_TOKEN``.
        :raises NotFoundError: ``USER_NOT_FOUND`` if the user is gone or inactive.
        """
        try:
            claims = self.sessions.codec.verify_refresh(refresh_token)
        except InvalidTokenError as exc:
            raise _invalid_refresh() from exc

        stored_user_id = self.sessions.validate_refresh(refresh_token)
        if stored_user_id is None or stored_user_id != claims.user_id:
            raise _invalid_refresh()

        try:
            user_id = int(claims.user_id)
        except ValueError as exc:
            raise _invalid_refresh() from exc

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None or not user.is_active:
                raise NotFoundError("User", user_id, message="User not found or inactive")
            out = UserOut.from_model(user)

        if not self.sessions.invalidate_refresh(refresh_token):
            raise _invalid_refresh()

        return self.sessions.issue_pair(out)

    def logout(self, dto: LogoutIn) -> None:
        """Blacklist the access token and drop the refresh token if given."""
        self.sessions.blacklist(dto.access_token)
        if dto.refresh_token:
            self.sessions.invalidate_refresh(dto.refresh_token)
        log.info("User logged out")

    # ------------------------------------------------------------------ #
    # Password recovery / change
    # ------------------------------------------------------------------ #

    def forgot_password(self, email: str) -> ForgotPasswordOut:
        """
        Start a password reset when ``email`` belongs to a user.

        The outcome is indistinguishable for unknown emails; the token is
        returned only when :attr:`AuthSettings.expose_reset_token` is set.
        """
        lifetime = timedelta(seconds=self.settings.reset_token_lifetime)
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                return ForgotPasswordOut()
            token = user.generate_password_reset_token(lifetime)
            uow.users.flush()
            user_id, to, first_name = user.id, user.email, user.first_name

        log.info("Password reset requested", extra={"user_id": user_id})
        self.mailer.send_password_reset_email(to=to, first_name=first_name, token=token)
        return ForgotPasswordOut(reset_token=token if self.settings.expose_reset_token else None)

    def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password using a live reset token, then burn the token.

        :raises InvalidRequestError: ``INVALID_TOKEN`` when unknown, used or expired.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_reset_token(token, now=utcnow())
            if user is None:
                raise InvalidRequestError("Invalid or expired reset token", code="INVALID_TOKEN")
            user.set_password(new_password, method=self.settings.password_hash_method)
            user.clear_password_reset()
            uow.users.flush()
            user_id = user.id

        log.info("Password reset completed", extra={"user_id": user_id})

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        :raises NotFoundError: ``USER_NOT_FOUND``.
        :raises AuthenticationError: ``INVALID_PASSWORD`` when the current password is wrong.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if not user.verify_password(dto.current_password):
                raise AuthenticationError("Current password is incorrect", code="INVALID_PASSWORD")
            if dto.new_password == dto.current_password:
                return
            user.set_password(
                dto.new_password,
                method=self.settings.password_hash_method,
                check_existing=False,
            )
            uow.users.flush()

        log.info("Password changed", extra={"user_id": dto.user_id})

    # ------------------------------------------------------------------ #
    # Email verification
    # ------------------------------------------------------------------ #

    def verify_email(self, token: str) -> None:
        """
        :raises InvalidRequestError: ``INVALID_TOKEN`` when no user holds ``token``.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_verification_token(token)
            if user is None:
                raise InvalidRequestError("Invalid verification token", code="INVALID_TOKEN")
            user.mark_email_verified()
            uow.users.flush()
            user_id, to, first_name = user.id, user.email, user.first_name

        log.info("Email verified", extra={"user_id": user_id})
        self.mailer.send_welcome_email(to=to, first_name=first_name)
