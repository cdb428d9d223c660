from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class OutgoingEmail:
    """
    Rendered transactional email.

    :param kind: Template key (``verification``, ``password_reset``, ``welcome``).
    :param to: Recipient address.
    :param subject: Subject line.
    :param body: Plain-text body.
    :param link: Action link embedded in the body, if any.
    """

    kind: str
    to: str
    subject: str
    body: str
    link: str | None = None


class EmailSender(Protocol):
    """Port for transactional emails sent by the auth flows."""

    def send_verification_email(self, *, to: str, first_name: str, token: str) -> None: ...

    def send_password_reset_email(self, *, to: str, first_name: str, token: str) -> None: ...

    def send_welcome_email(self, *, to: str, first_name: str) -> None: ...


@dataclass
class InMemoryEmailSender(EmailSender):
    """Records requested emails instead of delivering them (unit tests)."""

    outbox: list[dict[str, str]] = field(default_factory=list)

    def send_verification_email(self, *, to: str, first_name: str, token: str) -> None:
        self.outbox.append({"kind": "verification", "to": to, "token": token})

    def send_password_reset_email(self, *, to: str, first_name: str, token: str) -> None:
        self.outbox.append({"kind": "password_reset", "to": to, "token": token})

    def send_welcome_email(self, *, to: str, first_name: str) -> None:
        self.outbox.append({"kind": "welcome", "to": to})

    def last(self, kind: str) -> dict[str, str] | None:
        for message in reversed(self.outbox):
            if message["kind"] == kind:
                return message
        return None
