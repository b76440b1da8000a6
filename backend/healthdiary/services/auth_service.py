"""
Health Diary Backend — Auth Service
====================================

What:  Username/password login returning a signed JWT.
Who:   Called by POST /api/auth/login.

The token carries the public user fields (user_id, username, email,
user_level) so protected routes never need a user lookup.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from healthdiary.exceptions import AuthenticationError, ValidationError
from healthdiary.schemas.user import LoginResponse, TokenUser
from healthdiary.security import create_access_token, verify_password
from healthdiary.services.user_service import user_service

logger = logging.getLogger(__name__)


class AuthService:

    async def login(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> LoginResponse:
        """
        Raises:
            ValidationError:     either field missing or blank (→ 400)
            AuthenticationError: unknown user or wrong password (→ 401)
        """
        if not username or not password:
            raise ValidationError(message="Username and password are required.")

        user = await user_service.get_user_by_username(db, username)
        # Same message for both cases; don't reveal which usernames exist
        if user is None or not await verify_password(password, user.password):
            logger.warning("Failed login for '%s'", username)
            raise AuthenticationError(message="Bad username/password.")

        public = TokenUser.model_validate(user)
        token = create_access_token(public.model_dump())
        logger.info("Login successful: %s (ID: %d)", user.username, user.user_id)
        return LoginResponse(user=public, token=token)


auth_service = AuthService()
