"""
Health Diary Backend — Auth Dependencies
=========================================

What:  FastAPI dependencies that resolve the caller from the bearer token.
Who:   Injected into every protected route.

HTTPBearer(auto_error=False) lets us produce our own 401 body for a
missing header instead of FastAPI's default 403.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from healthdiary.exceptions import AuthenticationError, AuthorizationError
from healthdiary.models.user import USER_LEVEL_ADMIN
from healthdiary.schemas.user import TokenUser
from healthdiary.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    claims = decode_access_token(credentials.credentials)
    try:
        user = TokenUser.model_validate(claims)
    except PydanticValidationError:
        raise AuthorizationError(message="Invalid token. Please provide a valid token.")

    # Read back by the access log middleware
    request.state.user_id = user.user_id
    logger.debug("Token authenticated: %s (ID: %d)", user.username, user.user_id)
    return user


async def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    if user.user_level != USER_LEVEL_ADMIN:
        logger.warning("Admin access denied for %s", user.username)
        raise AuthorizationError(message="Admin access required")
    return user
