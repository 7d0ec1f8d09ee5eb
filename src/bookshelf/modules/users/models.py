"""User database models."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    SYSTEM_ACTOR_ID,
)
from bookshelf.core.database.base import Base, IntIdMixin, TimestampMixin


class User(Base, IntIdMixin, TimestampMixin):
    """User model representing an authenticated actor.

    The row with id 1 is the system actor. It is created by seeding,
    bypasses every authorization check and must never be deleted or
    reassigned.

    Attributes:
        email: Unique email address used to log in
        password_hash: Bcrypt-hashed password
        name: Display name
        is_active: Whether the user can authenticate
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    @property
    def is_system(self) -> bool:
        """Whether this user is the reserved system actor."""
        return self.id == SYSTEM_ACTOR_ID

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
