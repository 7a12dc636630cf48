"""Category endpoints, scoped to the tenant of the access token."""

from __future__ import annotations

from flask import Blueprint, request

from backoffice.api.deps import json_body, json_response, service_errors, timing
from backoffice.api.security import require_auth, service_context
from backoffice.schemas import (
    CategoryCreateSchema,
    CategoryListQuerySchema,
    CategorySchema,
    CategoryUpdateSchema,
    build_meta,
)
from backoffice.services.categories import (
    CategoryCreateIn,
    CategoryListIn,
    CategoryService,
    CategoryUpdateIn,
)

bp = Blueprint("categories", __name__)

create_schema = CategoryCreateSchema()
update_schema = CategoryUpdateSchema(partial=True)
list_query_schema = CategoryListQuerySchema()
category_schema = CategorySchema()
categories_schema = CategorySchema(many=True)


@bp.get("")
@require_auth
@timing
@service_errors
def list_categories():
    """Paginated list with ``search`` and ``sort``."""

    q = list_query_schema.load(request.args)
    result = CategoryService(ctx=service_context()).list_categories(
        CategoryListIn(page=q["page"], limit=q["limit"], sort=q["sort"], search=q["search"])
    )
    return json_response(
        {
            "data": categories_schema.dump(result.items),
            "meta": build_meta(
                total=result.total,
                page=result.page,
                limit=result.limit,
                total_pages=result.total_pages,
            ),
        }
    )


@bp.get("/all")
@require_auth
@timing
@service_errors
def list_all_categories():
    items = CategoryService(ctx=service_context()).list_all()
    return json_response({"data": categories_schema.dump(items)})


@bp.get("/public/<string:subdomain>")
@timing
@service_errors
def list_public_categories(subdomain: str):
    """Unauthenticated menu listing of a tenant resolved by subdomain."""

    items = CategoryService().list_public(subdomain)
    return json_response({"data": categories_schema.dump(items)})


@bp.post("")
@require_auth
@timing
@service_errors
def create_category():
    data = create_schema.load(json_body())
    category = CategoryService(ctx=service_context()).create(CategoryCreateIn(**data))
    return json_response({"data": category_schema.dump(category)}, status=201)


@bp.patch("/<int:category_id>")
@require_auth
@timing
@service_errors
def update_category(category_id: int):
    changes = update_schema.load(json_body())
    category = CategoryService(ctx=service_context()).update(
        CategoryUpdateIn(category_id=category_id, changes=changes)
    )
    return json_response({"data": category_schema.dump(category)})


@bp.delete("/<int:category_id>")
@require_auth
@timing
@service_errors
def delete_category(category_id: int):
    CategoryService(ctx=service_context()).delete(category_id)
    return json_response({"message": "Category deleted"})
