"""Food item endpoints, scoped to the tenant of the access token."""

from __future__ import annotations

from flask import Blueprint, request

from backoffice.api.deps import json_body, json_response, service_errors, timing
from backoffice.api.security import require_auth, service_context
from backoffice.schemas import (
    FoodCreateSchema,
    FoodListQuerySchema,
    FoodSchema,
    FoodUpdateSchema,
    PublicMenuSchema,
    build_meta,
)
from backoffice.services.foods import FoodCreateIn, FoodListIn, FoodService, FoodUpdateIn

bp = Blueprint("foods", __name__)

create_schema = FoodCreateSchema()
update_schema = FoodUpdateSchema(partial=True)
list_query_schema = FoodListQuerySchema(default_limit=10)
food_schema = FoodSchema()
foods_schema = FoodSchema(many=True)
public_menu_schema = PublicMenuSchema()


@bp.get("")
@require_auth
@timing
@service_errors
def list_foods():
    """Paginated list with ``search``, ``sortBy``/``order`` and ``sort``."""

    q = list_query_schema.load(request.args)
    result = FoodService(ctx=service_context()).list_foods(
        FoodListIn(page=q["page"], limit=q["limit"], sort=q["sort"], search=q["search"])
    )
    return json_response(
        {
            "data": foods_schema.dump(result.items),
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
def list_all_foods():
    items = FoodService(ctx=service_context()).list_all()
    return json_response({"data": foods_schema.dump(items)})


@bp.get("/public/<string:subdomain>")
@timing
@service_errors
def public_menu(subdomain: str):
    """Unauthenticated menu of a tenant resolved by subdomain."""

    menu = FoodService().public_menu(subdomain)
    return json_response(public_menu_schema.dump(menu))


@bp.post("")
@require_auth
@timing
@service_errors
def create_food():
    data = create_schema.load(json_body())
    food = FoodService(ctx=service_context()).create(FoodCreateIn(**data))
    return json_response(
        {"message": "Food created successfully", "data": food_schema.dump(food)}, status=201
    )


@bp.patch("/<int:food_id>")
@require_auth
@timing
@service_errors
def update_food(food_id: int):
    changes = update_schema.load(json_body())
    food = FoodService(ctx=service_context()).update(FoodUpdateIn(food_id=food_id, changes=changes))
    return json_response({"message": "Food updated successfully", "data": food_schema.dump(food)})


@bp.delete("/<int:food_id>")
@require_auth
@timing
@service_errors
def delete_food(food_id: int):
    FoodService(ctx=service_context()).delete(food_id)
    return json_response({"message": "Food deleted successfully"})
