"""Category Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from backoffice.schemas.common import ImageUrlSchema, PaginationQuerySchema


class CategoryCreateSchema(ImageUrlSchema):
    """Create payload; ``tenantId`` and other unknown keys are dropped."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(load_default=None, allow_none=True)


class CategoryUpdateSchema(CategoryCreateSchema):
    """Partial update payload (load with ``partial=True``)."""


class CategoryListQuerySchema(PaginationQuerySchema):
    pass


class CategorySchema(Schema):
    id = fields.Integer()
    name = fields.String()
    description = fields.String(allow_none=True)
    image_url = fields.String(allow_none=True, data_key="imageUrl")
    tenant_id = fields.String(data_key="tenantId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
