"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


def split_sort_tokens(raw: str | list[str] | None) -> list[str]:
    """Split ``"a,-b"`` into ``["a", "-b"]``; lists pass through unchanged."""
    if isinstance(raw, list):
        return raw
    return [segment.strip() for segment in (raw or "").split(",") if segment.strip()]


class SortQuerySchema(Schema):
    """Parse comma-separated ``sort`` query parameters into a list."""

    class Meta:
        unknown = EXCLUDE

    sort = fields.String(load_default="")

    @post_load
    def split_sort(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["sort"] = split_sort_tokens(data.get("sort"))
        return data


class PaginationQuerySchema(SortQuerySchema):
    """Validate ``page``/``limit``/``search`` with configurable defaults."""

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    search = fields.String(load_default=None, validate=validate.Length(max=100))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("page", 1)
        data["search"] = (data.get("search") or "").strip() or None
        return data


class ImageUrlSchema(Schema):
    """Optional ``imageUrl`` shared by menu resources.

    Any string is accepted: absolute URLs, upload paths such as
    ``/uploads/a.png``, or "" (stored as ``None``).
    """

    image_url = fields.String(
        load_default=None, allow_none=True, data_key="imageUrl", validate=validate.Length(max=500)
    )

    @post_load
    def blank_image_to_none(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        if "image_url" in data and not (data["image_url"] or "").strip():
            data["image_url"] = None
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total_pages = fields.Integer(required=True, data_key="totalPages")


def build_meta(*, total: int, page: int, limit: int, total_pages: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return MetaSchema().dump(
        {"total": int(total), "page": int(page), "limit": int(limit), "total_pages": int(total_pages)}
    )
