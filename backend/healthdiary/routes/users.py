"""
Health Diary Backend — User Route Handlers
===========================================

What:  Account registration and management under /api/users.

Access Rules:
    GET    /users       admin only
    POST   /users       public (registration)
    GET    /users/{id}  any authenticated user
    PUT    /users/{id}  the account owner only
    DELETE /users/{id}  admin only
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthdiary.database import get_db_session
from healthdiary.dependencies import get_current_user, require_admin
from healthdiary.exceptions import AuthorizationError
from healthdiary.schemas.common import ErrorResponse, MessageResponse
from healthdiary.schemas.user import (
    TokenUser,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
    UserUpdate,
)
from healthdiary.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


@router.get(
    "/users",
    response_model=List[UserResponse],
    responses={403: {"description": "Admin access required", "model": ErrorResponse}},
    summary="List all users (admin)",
)
async def list_users(
    _: TokenUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.post(
    "/users",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid username, email or password", "model": ErrorResponse},
        409: {"description": "Username or email already in use", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserCreatedResponse:
    user_id = await user_service.create_user(db, payload)
    return UserCreatedResponse(user_id=user_id)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by ID",
)
async def get_user(
    user_id: int,
    _: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.put(
    "/users/{user_id}",
    response_model=MessageResponse,
    responses={
        403: {"description": "Not the account owner", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        409: {"description": "Username or email already in use", "model": ErrorResponse},
    },
    summary="Update your own account",
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    current: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if current.user_id != user_id:
        logger.warning("User %d tried to edit user %d", current.user_id, user_id)
        raise AuthorizationError(message="Not authorized")
    await user_service.update_user(db, user_id, payload)
    return MessageResponse(message="User updated.")


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    responses={
        403: {"description": "Admin access required", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Delete a user and their entries (admin)",
)
async def delete_user(
    user_id: int,
    _: TokenUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted.")
