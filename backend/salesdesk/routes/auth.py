"""
SalesDesk Backend — Authentication Route Handlers
==================================================

What:  /auth endpoints: register and login are public; profile, password
       change and account deletion require a token.

Token Transport:
    The login response returns the token in `data.token`. Clients send it
    back verbatim in the `authtoken` header (name configurable through
    AUTH_HEADER); there is no "Bearer " prefix.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.config import Settings
from salesdesk.dependencies import get_current_user, get_db_session, get_settings, get_token_service
from salesdesk.schemas.common import ApiResponse, DeletedOut, ErrorResponse, ok
from salesdesk.schemas.user import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserData,
)
from salesdesk.security import CurrentUser, TokenService
from salesdesk.services.user_service import user_service
from salesdesk.validation import validated_body

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserData],
    response_model_exclude_unset=True,
    responses={400: {"description": "Validation error or email already registered", "model": ErrorResponse}},
)
async def register(
    payload: RegisterRequest = Depends(validated_body(RegisterRequest)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
    settings: Settings = Depends(get_settings),
):
    user = await user_service.register(db, payload, settings.bcrypt_rounds)
    return ok(message="User created successfully", data=UserData(user=user))


@router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    response_model_exclude_unset=True,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
)
async def login(
    payload: LoginRequest = Depends(validated_body(LoginRequest)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
):
    data = await user_service.login(db, payload, tokens, settings.bcrypt_rounds)
    return ok(message="Login successful", data=data)


@router.get(
    "/profile",
    response_model=ApiResponse[UserData],
    response_model_exclude_unset=True,
    responses={404: {"description": "User no longer exists", "model": ErrorResponse}},
)
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    user = await user_service.get_profile(db, current_user.user_id)
    return ok(data=UserData(user=user))


@router.put("/profile", response_model=ApiResponse[UserData], response_model_exclude_unset=True)
async def update_profile(
    current_user: CurrentUser = Depends(get_current_user),
    payload: ProfileUpdate = Depends(validated_body(ProfileUpdate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    user, changed = await user_service.update_profile(db, current_user.user_id, payload)
    message = "Profile updated successfully" if changed else "No changes made"
    return ok(message=message, data=UserData(user=user))


@router.put(
    "/change-password",
    response_model=ApiResponse[Dict[str, Any]],
    response_model_exclude_unset=True,
    responses={401: {"description": "Current password is incorrect", "model": ErrorResponse}},
)
async def change_password(
    current_user: CurrentUser = Depends(get_current_user),
    payload: ChangePasswordRequest = Depends(validated_body(ChangePasswordRequest)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
    settings: Settings = Depends(get_settings),
):
    await user_service.change_password(db, current_user.user_id, payload, settings.bcrypt_rounds)
    return ok(message="Password changed successfully")


@router.delete(
    "/{user_id}",
    dependencies=[Depends(get_current_user)],
    response_model=ApiResponse[DeletedOut],
    response_model_exclude_unset=True,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    deleted = await user_service.delete_user(db, user_id)
    return ok(message="User deleted successfully", data=deleted)
