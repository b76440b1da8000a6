"""
Health Diary Backend — User SQLAlchemy Model
=============================================

What:  ORM model for the `users` table.
Why:   Every diary entry belongs to a user; authentication and the admin
       checks read the username, password hash and user_level from here.
Who:   Used by UserService, AuthService and Alembic.

Table Design:
    - user_id: integer surrogate key, carried in JWT claims
    - username / email: unique, enforced in the database and pre-checked
      in the service so the client gets a readable 409 message
    - password: bcrypt hash, never serialized to the API
    - user_level: 'regular' or 'admin'
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from healthdiary.database import Base

USER_LEVEL_REGULAR = "regular"
USER_LEVEL_ADMIN = "admin"


class User(Base):
    """A registered diary owner."""

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        comment="3-20 alphanumeric characters",
    )

    # What: bcrypt hash ($2b$...), 60 characters
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    user_level: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=USER_LEVEL_REGULAR,
        server_default=text(f"'{USER_LEVEL_REGULAR}'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    @property
    def is_admin(self) -> bool:
        return self.user_level == USER_LEVEL_ADMIN

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, username='{self.username}', level='{self.user_level}')>"
