from .service import AuthService, NonceStore, get_auth_service
from .models import (
    AuthSession,
    VerifiedWallet,
    AuthError,
    SessionExpiredError,
    InvalidSignatureError,
    InvalidNonceError,
    TokenPayload,
)
from .middleware import require_auth

__all__ = [
    "AuthService",
    "NonceStore",
    "get_auth_service",
    "AuthSession",
    "VerifiedWallet",
    "AuthError",
    "SessionExpiredError",
    "InvalidSignatureError",
    "InvalidNonceError",
    "TokenPayload",
    "require_auth",
]
