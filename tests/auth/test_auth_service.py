from datetime import datetime, timedelta, timezone

import jwt
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from siwe import SiweMessage
from web3 import Web3

from agentchat.auth import (
    AuthError,
    AuthService,
    InvalidNonceError,
    InvalidSignatureError,
    NonceStore,
    SessionExpiredError,
)
from agentchat.auth.service import JWT_ALGORITHM

SIGNER_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SIGNER = Account.from_key(SIGNER_KEY)


def _signed_message(nonce: str, chain_id: int = 8453):
    message = SiweMessage(
        domain="chat.example",
        address=SIGNER.address,
        statement="Sign in to chat",
        uri="https://chat.example",
        version="1",
        chain_id=chain_id,
        nonce=nonce,
        issued_at="2025-01-01T00:00:00.000Z",
    ).prepare_message()
    signed = Account.sign_message(encode_defunct(text=message), private_key=SIGNER_KEY)
    return message, Web3.to_hex(signed.signature)


class TestNonceStore:

    def test_nonce_is_single_use(self):
        store = NonceStore(ttl_minutes=5)
        nonce, expires_at = store.issue("0xabc")
        assert nonce.isalnum() and len(nonce) == 32
        assert expires_at > datetime.now(timezone.utc)
        assert store.consume("0xabc", nonce)
        assert not store.consume("0xabc", nonce)

    def test_wrong_nonce_keeps_the_issued_one(self):
        store = NonceStore(ttl_minutes=5)
        nonce, _ = store.issue("0xabc")
        assert not store.consume("0xabc", "different")
        assert store.consume("0xabc", nonce)

    def test_expired_nonce(self):
        store = NonceStore(ttl_minutes=0)
        nonce, _ = store.issue("0xabc")
        assert not store.consume("0xabc", nonce)

    def test_reissue_replaces_nonce(self):
        store = NonceStore(ttl_minutes=5)
        first, _ = store.issue("0xabc")
        second, _ = store.issue("0xabc")
        assert not store.consume("0xabc", first)
        assert store.consume("0xabc", second)

    def test_expired_nonces_are_dropped_on_issue(self):
        store = NonceStore(ttl_minutes=0)
        for i in range(1000):
            store.issue(f"0x{i:040x}")
        assert len(store) == 1

    def test_store_is_capped(self):
        store = NonceStore(ttl_minutes=5, max_entries=3)
        oldest, _ = store.issue("0x1")
        for address in ("0x2", "0x3", "0x4"):
            store.issue(address)
        assert len(store) == 3
        assert not store.consume("0x1", oldest)

    def test_reissue_refreshes_eviction_order(self):
        store = NonceStore(ttl_minutes=5, max_entries=2)
        store.issue("0x1")
        store.issue("0x2")
        nonce, _ = store.issue("0x1")
        store.issue("0x3")
        assert store.consume("0x1", nonce)
        assert len(store) == 1


class TestAccessTokens:

    async def test_round_trip(self, auth_service):
        token, _ = auth_service._generate_access_token("0xabc", "s1", 8453)
        payload = await auth_service.verify_access_token(token)
        assert payload.sub == "0xabc"
        assert payload.session_id == "s1"
        assert payload.chain_id == 8453

    async def test_expired_token(self, auth_service):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "0xabc",
                "session_id": "s1",
                "chain_id": 1,
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
                "type": "access",
            },
            "test-secret",
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(SessionExpiredError):
            await auth_service.verify_access_token(token)

    async def test_wrong_secret(self, auth_service):
        token, _ = AuthService(secret="other-secret")._generate_access_token("0xabc", "s1", 1)
        with pytest.raises(AuthError, match="Invalid access token"):
            await auth_service.verify_access_token(token)

    async def test_wrong_token_type(self, auth_service):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "0xabc", "session_id": "s", "iat": now, "exp": now + timedelta(minutes=5), "type": "refresh"},
            "test-secret",
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(AuthError, match="Invalid token type"):
            await auth_service.verify_access_token(token)

    @pytest.mark.parametrize("missing", ["sub", "session_id", "exp", "iat"])
    async def test_token_missing_claim_is_rejected(self, auth_service, missing):
        now = datetime.now(timezone.utc)
        claims = {
            "sub": "0xabc",
            "session_id": "s1",
            "iat": now,
            "exp": now + timedelta(minutes=5),
            "type": "access",
        }
        del claims[missing]
        token = jwt.encode(claims, "test-secret", algorithm=JWT_ALGORITHM)
        with pytest.raises(AuthError, match="Invalid access token"):
            await auth_service.verify_access_token(token)

    async def test_missing_secret(self):
        service = AuthService(secret="")
        with pytest.raises(AuthError, match="JWT_SECRET is not configured"):
            await service.verify_access_token("anything")


class TestSignIn:

    async def test_verify_and_create_session(self, auth_service):
        issued = await auth_service.generate_nonce(SIGNER.address)
        message, signature = _signed_message(issued["nonce"])

        wallet = await auth_service.verify_signature(message, signature)
        assert wallet.address == SIGNER.address.lower()
        assert wallet.chain_id == 8453

        session = await auth_service.create_session(wallet)
        payload = await auth_service.verify_access_token(session.access_token)
        assert payload.sub == wallet.address
        assert payload.session_id == session.session_id

    async def test_nonce_cannot_be_replayed(self, auth_service):
        issued = await auth_service.generate_nonce(SIGNER.address)
        message, signature = _signed_message(issued["nonce"])
        await auth_service.verify_signature(message, signature)
        with pytest.raises(InvalidNonceError):
            await auth_service.verify_signature(message, signature)

    async def test_unissued_nonce(self, auth_service):
        message, signature = _signed_message("abcdef1234567890")
        with pytest.raises(InvalidNonceError):
            await auth_service.verify_signature(message, signature)

    async def test_malformed_message(self, auth_service):
        with pytest.raises(InvalidSignatureError):
            await auth_service.verify_signature("not a siwe message", "0x00")
