from .dto import (
    CategoryCreateIn,
    CategoryListIn,
    CategoryListOut,
    CategoryOut,
    CategoryUpdateIn,
)
from .service import CategoryService

__all__ = [
    "CategoryCreateIn",
    "CategoryListIn",
    "CategoryListOut",
    "CategoryOut",
    "CategoryService",
    "CategoryUpdateIn",
]
