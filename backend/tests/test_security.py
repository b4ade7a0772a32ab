"""
SalesDesk Backend — Password & Token Tests
===========================================

What we test:
    ✅ bcrypt hash verifies the original password only
    ✅ Malformed stored hashes fail verification instead of raising
    ✅ Tokens round-trip the user id
    ✅ Tampered, foreign-secret, expired and claim-less tokens → ForbiddenError
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from salesdesk.exceptions import ForbiddenError
from salesdesk.security import TokenService, hash_password, verify_password

SECRET = "unit-test-secret"


class TestPasswordHashing:

    @pytest.mark.asyncio
    async def test_hash_then_verify(self):
        password_hash = await hash_password("s3cret-pass", rounds=4)

        assert password_hash != "s3cret-pass"
        assert password_hash.startswith("$2")
        assert await verify_password("s3cret-pass", password_hash) is True
        assert await verify_password("wrong-pass", password_hash) is False

    @pytest.mark.asyncio
    async def test_same_password_gets_different_salts(self):
        first = await hash_password("s3cret-pass", rounds=4)
        second = await hash_password("s3cret-pass", rounds=4)
        assert first != second

    @pytest.mark.asyncio
    async def test_malformed_hash_is_a_failed_match(self):
        assert await verify_password("anything", "not-a-bcrypt-hash") is False


class TestTokenService:

    def setup_method(self):
        self.tokens = TokenService(secret=SECRET, expires_minutes=5)

    def test_issue_and_verify(self):
        token = self.tokens.issue("user-123")
        assert self.tokens.verify(token).user_id == "user-123"

    def test_payload_carries_user_id_and_expiry(self):
        payload = jwt.decode(self.tokens.issue("user-123"), SECRET, algorithms=["HS256"])
        assert payload["userId"] == "user-123"
        assert payload["exp"] - payload["iat"] == 5 * 60

    def test_tampered_token_rejected(self):
        token = self.tokens.issue("user-123")
        tampered = token[:-2] + ("AA" if not token.endswith("AA") else "BB")
        with pytest.raises(ForbiddenError):
            self.tokens.verify(tampered)

    def test_token_from_other_secret_rejected(self):
        other = TokenService(secret="some-other-secret")
        with pytest.raises(ForbiddenError):
            self.tokens.verify(other.issue("user-123"))

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"userId": "user-123", "iat": past - timedelta(minutes=5), "exp": past},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(ForbiddenError):
            self.tokens.verify(token)

    def test_token_without_expiry_rejected(self):
        token = jwt.encode({"userId": "user-123"}, SECRET, algorithm="HS256")
        with pytest.raises(ForbiddenError):
            self.tokens.verify(token)

    def test_token_without_user_id_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"sub": "user-123", "exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(ForbiddenError):
            self.tokens.verify(token)

    def test_garbage_rejected(self):
        with pytest.raises(ForbiddenError):
            self.tokens.verify("not.a.token")

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret="")
