"""
SalesDesk Backend — Password Hashing & Token Authentication
============================================================

What:  bcrypt password hashing, HS256 token issue/verify, and the FastAPI
       dependency that guards every non-public route.
Why:   Credentials and tokens are the only secrets the API handles; keeping
       them in one module keeps the audit surface small.
How:   - Passwords: bcrypt with a configurable cost factor. Hashing runs in
         Starlette's thread pool so a login never blocks the event loop.
       - Tokens: PyJWT, payload `{"userId", "iat", "exp"}`, signed with the
         configured secret. The TokenService is built once by create_app()
         and stored on `app.state.tokens`.
       - Guard: get_current_user() reads the raw token from the configured
         header (default `authtoken`, no "Bearer " prefix).

Failure Mapping:
    header missing or empty           → AuthenticationError (401)
    bad signature / malformed / expired → ForbiddenError (403)

Security Notes:
    - Token and password values are never logged.
    - bcrypt only reads the first 72 bytes of a password; longer inputs are
      cut explicitly so every bcrypt release treats them the same way.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from salesdesk.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


# ── Passwords ─────────────────────────────────────────────────────────────


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def _hash_sync(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def _verify_sync(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash: treat as a failed match
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


async def hash_password(password: str, rounds: int) -> str:
    """Salted bcrypt hash, computed off the event loop."""
    return await run_in_threadpool(_hash_sync, password, rounds)


async def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison of `password` against a stored bcrypt hash."""
    return await run_in_threadpool(_verify_sync, password, password_hash)


# ── Tokens ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CurrentUser:
    """Identity extracted from a verified token."""

    user_id: str


class TokenService:
    """
    Issues and verifies signed access tokens.

    Holds the signing secret, so exactly one instance exists per application
    (app.state.tokens). Tests build their own with a known secret.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 120):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    @classmethod
    def from_settings(cls, settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_minutes=settings.jwt_expires_minutes,
        )

    def issue(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "userId": user_id,
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> CurrentUser:
        """
        Decode and check a token.

        Raises:
            ForbiddenError: signature mismatch, malformed token, expired
                            token, or a payload without a userId claim.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise ForbiddenError()
        except jwt.InvalidTokenError as e:
            logger.info("Rejected invalid token: %s", type(e).__name__)
            raise ForbiddenError()

        user_id = payload.get("userId")
        if not isinstance(user_id, str) or not user_id:
            logger.info("Rejected token without userId claim")
            raise ForbiddenError()
        return CurrentUser(user_id=user_id)


# ── Guard Dependency ──────────────────────────────────────────────────────


def get_token_service(request: Request) -> TokenService:
    tokens = getattr(request.app.state, "tokens", None)
    if tokens is None:
        raise RuntimeError("TokenService is not configured on the application")
    return tokens


async def get_current_user(request: Request) -> CurrentUser:
    """
    FastAPI dependency guarding authenticated routes.

    Example:
        @router.get("/company")
        async def list_companies(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    header_name = request.app.state.settings.auth_header
    token = request.headers.get(header_name)
    if not token:
        raise AuthenticationError()
    return get_token_service(request).verify(token)
