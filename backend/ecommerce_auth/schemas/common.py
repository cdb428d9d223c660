"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def not_blank(value: str) -> None:
    """Reject strings made only of whitespace."""
    if not value.strip():
        raise ValidationError("Must not be blank.")


def dotted_domain(value: str) -> None:
    """Require a dot in the domain part, so addresses like ``bob@localhost`` fail."""
    _, _, domain = value.rpartition("@")
    if "." not in domain.strip("."):
        raise ValidationError("Not a valid email address.")


NAME_RULE = [validate.Length(min=1, max=50), not_blank]


class UTCDateTime(fields.DateTime):
    """ISO-8601 datetime that renders naive values as UTC.

    SQLite drops the offset of timezone-aware columns on read.
    """

    def _serialize(self, value: datetime | None, attr, obj, **kwargs):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return super()._serialize(value, attr, obj, **kwargs)


class RequestSchema(Schema):
    """Base for request payloads: unknown keys are dropped, not rejected."""

    class Meta:
        unknown = EXCLUDE


class PaginationQuerySchema(RequestSchema):
    """Validate ``page``/``limit`` query parameters, clamping ``limit`` to 1..100."""

    def __init__(
        self, *, default_limit: int = DEFAULT_PAGE_SIZE, max_limit: int = MAX_PAGE_SIZE, **kwargs: Any
    ) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer()

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("page", 1)
        return data


class MetaSchema(Schema):
    """Pagination block for list responses."""

    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total = fields.Integer(required=True)
    pages = fields.Integer(required=True)

