"""
Authentication models and exceptions.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class AuthError(Exception):
    """Base authentication error."""
    pass


class SessionExpiredError(AuthError):
    """Session has expired."""
    pass


class InvalidSignatureError(AuthError):
    """SIWE signature is invalid."""
    pass


class InvalidNonceError(AuthError):
    """Nonce is invalid or expired."""
    pass


class VerifiedWallet(BaseModel):
    """Wallet verified via SIWE signature."""
    address: str
    chain_id: int


class AuthSession(BaseModel):
    """Authenticated session."""
    session_id: str
    wallet_address: str
    chain_id: int
    access_token: str
    expires_at: datetime


class NonceRequest(BaseModel):
    """Request for nonce generation."""
    wallet_address: str


class NonceResponse(BaseModel):
    """Nonce for the wallet sign-in message."""
    nonce: str
    expires_at: str


class VerifyRequest(BaseModel):
    """Request to verify SIWE signature."""
    message: str
    signature: str


class AuthResponse(BaseModel):
    """Response after successful authentication."""
    access_token: str
    expires_at: str
    wallet_address: str
    chain_id: int


class SessionInfo(BaseModel):
    """Current session info."""
    wallet_address: str
    chain_id: int
    expires_at: Optional[str] = None


class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: str  # wallet address
    session_id: str
    chain_id: int
    exp: int  # expiration timestamp
    iat: int  # issued at timestamp
    type: str = "access"
