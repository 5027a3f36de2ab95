"""
Authentication API endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from ..auth import AuthError, AuthService, TokenPayload, get_auth_service, require_auth
from ..auth.models import (
    AuthResponse,
    NonceRequest,
    NonceResponse,
    SessionInfo,
    VerifyRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/nonce", response_model=NonceResponse)
async def get_nonce(
    request: NonceRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Generate a nonce for wallet sign-in.

    The client should use this nonce when creating the SIWE message.
    """
    result = await auth_service.generate_nonce(request.wallet_address)
    return NonceResponse(
        nonce=result["nonce"],
        expires_at=result["expires_at"],
    )


@router.post("/verify", response_model=AuthResponse)
async def verify_signature(
    request: VerifyRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Verify a SIWE signature and create a session.

    Returns a JWT access token for authenticated requests.
    """
    try:
        wallet = await auth_service.verify_signature(
            message=request.message,
            signature=request.signature,
        )
        session = await auth_service.create_session(wallet)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    return AuthResponse(
        access_token=session.access_token,
        expires_at=session.expires_at.isoformat(),
        wallet_address=session.wallet_address,
        chain_id=session.chain_id,
    )


@router.get("/session", response_model=SessionInfo)
async def get_current_session(
    auth: TokenPayload = Depends(require_auth),
):
    """
    Get the current authenticated session info.

    Requires a valid access token.
    """
    return SessionInfo(
        wallet_address=auth.sub,
        chain_id=auth.chain_id,
        expires_at=datetime.fromtimestamp(auth.exp, tz=timezone.utc).isoformat(),
    )
