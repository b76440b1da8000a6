"""
Health Diary Backend — User Service
====================================

What:  Registration, lookup, update and deletion of user accounts.
Who:   Called by the /api/users route handlers and by AuthService.

Duplicate handling:
    The service checks username and email before inserting so the client
    gets a specific message ("Username is already in use"). The unique
    constraints still back this up: an IntegrityError from a race between
    two registrations becomes the generic ConflictError.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from healthdiary.exceptions import ConflictError, DatabaseError, NotFoundError
from healthdiary.models.entry import DiaryEntry
from healthdiary.models.user import User
from healthdiary.schemas.user import UserCreate, UserResponse, UserUpdate
from healthdiary.security import hash_password

logger = logging.getLogger(__name__)


class UserService:
    """Stateless; receives the request's session on every call."""

    async def _ensure_unique(
        self,
        db: AsyncSession,
        username: Optional[str],
        email: Optional[str],
        exclude_user_id: Optional[int] = None,
    ) -> None:
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return

        query = select(User).where(or_(*conditions))
        if exclude_user_id is not None:
            query = query.where(User.user_id != exclude_user_id)
        result = await db.execute(query)

        for existing in result.scalars().all():
            if email and existing.email == email:
                raise ConflictError(message="Email address is already in use", field="email")
            if username and existing.username == username:
                raise ConflictError(message="Username is already in use", field="username")

    async def _get_or_404(self, db: AsyncSession, user_id: int) -> User:
        result = await db.execute(select(User).where(User.user_id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def create_user(self, db: AsyncSession, payload: UserCreate) -> int:
        """
        Register a new account with user_level 'regular'.

        Returns:
            The new user_id

        Raises:
            ConflictError: username or email already taken (→ 409)
        """
        await self._ensure_unique(db, payload.username, payload.email)

        user = User(
            username=payload.username,
            email=payload.email,
            password=await hash_password(payload.password),
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Duplicate account on insert: %s", str(e.orig))
            raise ConflictError()
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("User created: %s (ID: %d)", user.username, user.user_id)
        return user.user_id

    async def get_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        user = await self._get_or_404(db, user_id)
        return UserResponse.model_validate(user)

    async def get_user_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        result = await db.execute(select(User).order_by(User.user_id))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def update_user(self, db: AsyncSession, user_id: int, payload: UserUpdate) -> None:
        """Apply the fields present in the payload; password is re-hashed."""
        user = await self._get_or_404(db, user_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        await self._ensure_unique(
            db, changes.get("username"), changes.get("email"), exclude_user_id=user_id
        )

        if "password" in changes:
            changes["password"] = await hash_password(changes["password"])
        for field, value in changes.items():
            setattr(user, field, value)

        try:
            await db.flush()
        except IntegrityError:
            raise ConflictError()
        logger.info("User %d updated: %s", user_id, sorted(changes))

    async def delete_user(self, db: AsyncSession, user_id: int) -> None:
        """Delete a user together with all of their diary entries."""
        user = await self._get_or_404(db, user_id)
        await db.execute(delete(DiaryEntry).where(DiaryEntry.user_id == user_id))
        await db.delete(user)
        await db.flush()
        logger.info("User %d deleted", user_id)


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
