"""Authentication service for credential login."""

from typing import Annotated

import structlog
from fastapi import Depends

from bookshelf.api.dependencies import DBSession
from bookshelf.core.auth.backend import (
    access_token_ttl_seconds,
    create_access_token,
    verify_password,
)
from bookshelf.core.auth.schemas import TokenResponse
from bookshelf.core.errors import UnauthorizedError
from bookshelf.modules.users.models import User
from bookshelf.modules.users.repos import UserRepository


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Issues access tokens; it never decides what the caller may do.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the matching active user.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            The authenticated user

        Raises:
            UnauthorizedError: If credentials are invalid or the user is inactive
        """
        user = await self.user_repo.get_by_email(email)
        if (
            user is None
            or not user.is_active
            or not verify_password(password, user.password_hash)
        ):
            logger.info("login_failed", email=email)
            raise UnauthorizedError(
                "Invalid credentials",
                error_code="invalid_credentials",
            )
        return user

    async def login(self, email: str, password: str) -> TokenResponse:
        """Authenticate a user and issue an access token.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Access token response

        Raises:
            UnauthorizedError: If credentials are invalid
        """
        user = await self.authenticate(email, password)
        logger.info("login_succeeded", user_id=user.id)
        return TokenResponse(
            access_token=create_access_token(user.id),
            expires_in=access_token_ttl_seconds(),
        )


AuthSvc = Annotated[AuthService, Depends(AuthService)]
