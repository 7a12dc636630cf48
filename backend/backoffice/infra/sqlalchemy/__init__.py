from .sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore

__all__ = ["SQLAlchemyRefreshTokenStore"]
