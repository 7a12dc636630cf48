"""Food item Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from backoffice.schemas.common import ImageUrlSchema, PaginationQuerySchema, split_sort_tokens

# Public ``sortBy`` values -> repository sort fields.
SORT_BY_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
    "price": "price",
}


class FoodCreateSchema(ImageUrlSchema):
    """Create payload; ``tenantId`` and other unknown keys are dropped."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    price = fields.Float(required=True, validate=validate.Range(min=0))
    description = fields.String(load_default=None, allow_none=True)
    category_id = fields.Integer(required=True, data_key="categoryId")


class FoodUpdateSchema(FoodCreateSchema):
    """Partial update payload (load with ``partial=True``)."""


class FoodListQuerySchema(PaginationQuerySchema):
    """
    Pagination plus ``sortBy``/``order``.

    ``sortBy=price&order=desc`` becomes the sort token ``-price``, placed
    before any explicit ``sort`` tokens.
    """

    sort_by = fields.String(
        load_default=None, data_key="sortBy", validate=validate.OneOf(tuple(SORT_BY_FIELDS))
    )
    order = fields.String(load_default="asc", validate=validate.OneOf(("asc", "desc")))

    @post_load
    def sort_by_to_token(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        sort_by = data.pop("sort_by", None)
        order = data.pop("order", "asc")
        tokens = split_sort_tokens(data.get("sort"))
        if sort_by:
            field = SORT_BY_FIELDS[sort_by]
            tokens = [f"-{field}" if order == "desc" else field, *tokens]
        data["sort"] = tokens
        return data


class FoodCategorySchema(Schema):
    id = fields.Integer()
    name = fields.String()


class FoodSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    price = fields.Float()
    description = fields.String(allow_none=True)
    image_url = fields.String(allow_none=True, data_key="imageUrl")
    category_id = fields.Integer(data_key="categoryId")
    category = fields.Nested(FoodCategorySchema, allow_none=True)
    tenant_id = fields.String(data_key="tenantId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class PublicMenuSchema(Schema):
    """``{"tenant": {"name", "id"}, "data": [...]}`` for anonymous visitors."""

    tenant = fields.Method("get_tenant")
    data = fields.List(fields.Nested(FoodSchema), attribute="items")

    def get_tenant(self, obj):
        return {"name": obj.tenant_name, "id": obj.tenant_id}
