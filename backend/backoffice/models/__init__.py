from backoffice.models.category import Category
from backoffice.models.food import Food
from backoffice.models.refresh_token import RefreshToken
from backoffice.models.tenant import Tenant
from backoffice.models.user import ROLE_ADMIN, ROLE_USER, ROLES, User

__all__ = [
    "Category",
    "Food",
    "RefreshToken",
    "ROLE_ADMIN",
    "ROLE_USER",
    "ROLES",
    "Tenant",
    "User",
]
