from .dto import LoginIn, LoginOut, LogoutIn, RefreshIn, TokenPairOut, UserSummary
from .service import AuthService

__all__ = [
    "AuthService",
    "LoginIn",
    "LoginOut",
    "LogoutIn",
    "RefreshIn",
    "TokenPairOut",
    "UserSummary",
]
