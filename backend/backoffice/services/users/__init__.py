from .dto import UserListIn, UserListOut, UserRegisterIn
from .service import UserService

__all__ = ["UserListIn", "UserListOut", "UserRegisterIn", "UserService"]
