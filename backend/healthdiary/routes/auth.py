"""
Health Diary Backend — Auth Route Handlers
===========================================

What:  POST /api/auth/login (credentials → JWT) and GET /api/auth/me.
Who:   Called by the client Auth module on login and session restore.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from healthdiary.database import get_db_session
from healthdiary.dependencies import get_current_user
from healthdiary.schemas.common import ErrorResponse
from healthdiary.schemas.user import LoginRequest, LoginResponse, TokenUser
from healthdiary.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Username or password missing", "model": ErrorResponse},
        401: {"description": "Bad username/password", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await auth_service.login(db, payload.username, payload.password)


@router.get(
    "/me",
    response_model=TokenUser,
    responses={
        401: {"description": "Token missing or expired", "model": ErrorResponse},
        403: {"description": "Invalid token", "model": ErrorResponse},
    },
    summary="Return the user the token was issued to",
)
async def me(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    return user
