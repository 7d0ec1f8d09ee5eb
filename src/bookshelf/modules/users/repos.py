"""User repository for database operations."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import select

from bookshelf.api.dependencies import DBSession
from bookshelf.core.constants import SYSTEM_ACTOR_ID
from bookshelf.core.errors import ConflictError
from bookshelf.modules.users.models import User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's integer id

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def delete(self, user: User) -> None:
        """Delete a user.

        Args:
            user: User instance to delete

        Raises:
            ConflictError: If the user is the system actor
        """
        if user.id == SYSTEM_ACTOR_ID:
            raise ConflictError(
                "The system user cannot be deleted",
                error_code="system_user_protected",
            )
        await self.session.delete(user)
        await self.session.flush()


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
