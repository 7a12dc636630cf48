"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    LoginUserSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)
from .category import (
    CategoryCreateSchema,
    CategoryListQuerySchema,
    CategorySchema,
    CategoryUpdateSchema,
)
from .common import (
    ImageUrlSchema,
    MetaSchema,
    PaginationQuerySchema,
    SortQuerySchema,
    build_meta,
)
from .food import (
    FoodCreateSchema,
    FoodListQuerySchema,
    FoodSchema,
    FoodUpdateSchema,
    PublicMenuSchema,
)

__all__ = [
    "CategoryCreateSchema",
    "CategoryListQuerySchema",
    "CategorySchema",
    "CategoryUpdateSchema",
    "FoodCreateSchema",
    "FoodListQuerySchema",
    "FoodSchema",
    "FoodUpdateSchema",
    "ImageUrlSchema",
    "LoginSchema",
    "LoginUserSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "PublicMenuSchema",
    "RegisterSchema",
    "SortQuerySchema",
    "TokenPairSchema",
    "UserSchema",
    "build_meta",
]
