from .dto import (
    FoodCategoryOut,
    FoodCreateIn,
    FoodListIn,
    FoodListOut,
    FoodOut,
    FoodUpdateIn,
    PublicMenuOut,
)
from .service import FoodService

__all__ = [
    "FoodCategoryOut",
    "FoodCreateIn",
    "FoodListIn",
    "FoodListOut",
    "FoodOut",
    "FoodService",
    "FoodUpdateIn",
    "PublicMenuOut",
]
