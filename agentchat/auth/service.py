"""
Authentication service using Sign-In With Ethereum (EIP-4361).
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

import jwt
from siwe import SiweMessage, VerificationError

from ..config import settings
from .models import (
    AuthSession,
    VerifiedWallet,
    AuthError,
    SessionExpiredError,
    InvalidSignatureError,
    InvalidNonceError,
    TokenPayload,
)


JWT_ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NonceStore:
    """In-process store of outstanding sign-in nonces, one per wallet address.

    Entries are kept in issue order, so the first entry always expires first.
    """

    def __init__(self, ttl_minutes: int, max_entries: Optional[int] = None):
        self.ttl = timedelta(minutes=ttl_minutes)
        self.max_entries = max_entries or settings.nonce_store_max_entries
        self._nonces: Dict[str, Tuple[str, datetime]] = {}

    def __len__(self) -> int:
        return len(self._nonces)

    def _purge_expired(self, now: datetime) -> None:
        while self._nonces:
            address, (_, expires_at) = next(iter(self._nonces.items()))
            if expires_at > now:
                break
            del self._nonces[address]

    def issue(self, wallet_address: str) -> Tuple[str, datetime]:
        now = _utcnow()
        self._purge_expired(now)
        # Re-issuing moves the address to the end
        self._nonces.pop(wallet_address, None)
        while len(self._nonces) >= self.max_entries:
            del self._nonces[next(iter(self._nonces))]

        # SIWE requires an alphanumeric nonce
        nonce = secrets.token_hex(16)
        expires_at = now + self.ttl
        self._nonces[wallet_address] = (nonce, expires_at)
        return nonce, expires_at

    def consume(self, wallet_address: str, nonce: str) -> bool:
        """Return True and forget the nonce if it matches and has not expired."""
        entry = self._nonces.get(wallet_address)
        if entry is None:
            return False
        stored, expires_at = entry
        if expires_at <= _utcnow():
            del self._nonces[wallet_address]
            return False
        if not secrets.compare_digest(stored, nonce):
            return False
        del self._nonces[wallet_address]
        return True


class AuthService:
    """
    Authentication service using wallet sign-in.

    Flow:
    1. Client requests nonce via POST /auth/nonce
    2. Client signs a SIWE message containing the nonce
    3. Client sends message + signature to POST /auth/verify
    4. Server verifies and returns a JWT access token
    5. Client sends the token as a Bearer credential (e.g. to /api/chat)
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        nonce_store: Optional[NonceStore] = None,
        access_token_expire_minutes: Optional[int] = None,
    ):
        self.secret = secret if secret is not None else settings.jwt_secret
        self.nonce_store = nonce_store or NonceStore(settings.nonce_expire_minutes)
        self.access_token_expire_minutes = access_token_expire_minutes or settings.access_token_expire_minutes

    def _require_secret(self) -> str:
        if not self.secret:
            raise AuthError("JWT_SECRET is not configured")
        return self.secret

    async def generate_nonce(self, wallet_address: str) -> dict:
        """
        Generate a unique nonce for wallet sign-in.

        The nonce expires after ``settings.nonce_expire_minutes``.
        """
        nonce, expires_at = self.nonce_store.issue(self._normalize_wallet_address(wallet_address))
        return {
            "nonce": nonce,
            "expires_at": expires_at.isoformat(),
        }

    async def verify_signature(self, message: str, signature: str) -> VerifiedWallet:
        """
        Verify a SIWE signature and return the verified wallet.
        """
        try:
            siwe_message = SiweMessage.from_message(message)
        except Exception as e:
            raise InvalidSignatureError(f"Malformed sign-in message: {e}") from e

        try:
            siwe_message.verify(signature)
        except VerificationError as e:
            raise InvalidSignatureError(f"Signature verification failed: {e}")

        normalized_address = self._normalize_wallet_address(siwe_message.address)
        if not self.nonce_store.consume(normalized_address, siwe_message.nonce):
            raise InvalidNonceError("Nonce is invalid or expired")

        return VerifiedWallet(
            address=normalized_address,
            chain_id=siwe_message.chain_id,
        )

    async def create_session(self, wallet: VerifiedWallet) -> AuthSession:
        """
        Create a new authenticated session for a verified wallet.
        """
        session_id = secrets.token_urlsafe(32)
        access_token, expires_at = self._generate_access_token(
            wallet_address=wallet.address,
            session_id=session_id,
            chain_id=wallet.chain_id,
        )
        return AuthSession(
            session_id=session_id,
            wallet_address=wallet.address,
            chain_id=wallet.chain_id,
            access_token=access_token,
            expires_at=expires_at,
        )

    async def verify_access_token(self, token: str) -> TokenPayload:
        """
        Verify an access token and return the payload.
        """
        try:
            payload = jwt.decode(
                token,
                self._require_secret(),
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "session_id", "exp", "iat"]},
            )

            if payload.get("type") != "access":
                raise AuthError("Invalid token type")

            return TokenPayload(
                sub=payload["sub"],
                session_id=payload["session_id"],
                chain_id=payload.get("chain_id", 1),
                exp=payload["exp"],
                iat=payload["iat"],
                type="access",
            )

        except jwt.ExpiredSignatureError:
            raise SessionExpiredError("Access token has expired")
        except jwt.InvalidTokenError as e:
            raise AuthError(f"Invalid access token: {e}")

    def _generate_access_token(
        self,
        wallet_address: str,
        session_id: str,
        chain_id: int,
    ) -> Tuple[str, datetime]:
        """Generate a JWT access token."""
        now = _utcnow()
        expires_at = now + timedelta(minutes=self.access_token_expire_minutes)
        payload = {
            "sub": wallet_address,
            "session_id": session_id,
            "chain_id": chain_id,
            "exp": expires_at,
            "iat": now,
            "type": "access",
        }
        return jwt.encode(payload, self._require_secret(), algorithm=JWT_ALGORITHM), expires_at

    def _normalize_wallet_address(self, address: str) -> str:
        return address.lower() if address else address


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
