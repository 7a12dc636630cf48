from .pyjwt_token_provider import JWTSigner, PyJWTTokenProvider

__all__ = ["JWTSigner", "PyJWTTokenProvider"]
