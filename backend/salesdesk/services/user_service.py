"""
SalesDesk Backend — User & Authentication Service
==================================================

What:  Registration, login, profile management and account deletion.
Why:   Keeps credential handling (hashing, verification, token issue) out
       of the route layer.

Login Flow:
    1. Look the user up by email.
    2. Unknown email: still run one bcrypt hash so the response time does
       not reveal whether the account exists, then fail.
    3. Verify the password against the stored hash.
    4. Issue a signed token carrying the user id.

    Steps 2 and 3 fail with the same AuthenticationError
    ("Invalid email or password"), so the response never says which part
    of the credentials was wrong.
"""

import logging
from datetime import datetime, timezone
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.exceptions import AuthenticationError, DuplicateError, NotFoundError
from salesdesk.schemas.common import DeletedOut
from salesdesk.schemas.user import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserOut,
)
from salesdesk.security import TokenService, hash_password, verify_password
from salesdesk.stores import user_store
from salesdesk.stores.errors import DuplicateKeyError

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class UserService:
    """
    Business logic for user accounts.

    Cost-factor and token settings are passed per call rather than held on
    the instance, so the singleton stays configuration-free.
    """

    async def register(
        self, db: AsyncSession, payload: RegisterRequest, bcrypt_rounds: int
    ) -> UserOut:
        if await user_store.find_by_email(db, payload.email) is not None:
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE, field="email")

        password_hash = await hash_password(payload.password, bcrypt_rounds)
        try:
            user = await user_store.create(
                db,
                {"name": payload.name, "email": payload.email, "password_hash": password_hash},
            )
        except DuplicateKeyError as e:
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE, field="email") from e

        logger.info("User registered: %s", user.id)
        return UserOut.model_validate(user)

    async def login(
        self,
        db: AsyncSession,
        payload: LoginRequest,
        tokens: TokenService,
        bcrypt_rounds: int,
    ) -> LoginData:
        user = await user_store.find_by_email(db, payload.email)
        if user is None:
            await hash_password(payload.password, bcrypt_rounds)
            logger.info("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if not await verify_password(payload.password, user.password_hash):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("Login succeeded: %s", user.id)
        return LoginData(user=UserOut.model_validate(user), token=tokens.issue(user.id))

    async def get_profile(self, db: AsyncSession, user_id: str) -> UserOut:
        user = await user_store.find_by_id(db, user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)
        return UserOut.model_validate(user)

    async def update_profile(
        self, db: AsyncSession, user_id: str, payload: ProfileUpdate
    ) -> Tuple[UserOut, bool]:
        """Returns the current profile and whether anything was written."""
        if await user_store.find_by_id(db, user_id) is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        affected = await user_store.update(db, user_id, {"name": payload.name})
        if affected:
            logger.info("Profile updated: %s", user_id)
        return await self.get_profile(db, user_id), bool(affected)

    async def change_password(
        self,
        db: AsyncSession,
        user_id: str,
        payload: ChangePasswordRequest,
        bcrypt_rounds: int,
    ) -> None:
        user = await user_store.find_by_id(db, user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        if not await verify_password(payload.current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        new_hash = await hash_password(payload.new_password, bcrypt_rounds)
        if await user_store.update_password(db, user_id, new_hash) == 0:
            raise NotFoundError(resource="User", resource_id=user_id)
        logger.info("Password changed: %s", user_id)

    async def delete_user(self, db: AsyncSession, user_id: str) -> DeletedOut:
        if await user_store.find_by_id(db, user_id) is None:
            raise NotFoundError(resource="User", resource_id=user_id)
        if await user_store.delete(db, user_id) == 0:
            raise NotFoundError(resource="User", resource_id=user_id)

        logger.info("User deleted: %s", user_id)
        return DeletedOut(id=user_id, deleted_at=datetime.now(timezone.utc))


user_service = UserService()
