"""Authentication dependencies: bearer token in, active ``User`` out.

Any failure here is a 401, except a deactivated account, which is
authenticated but refused with a 403. Authorization happens later, in
``bookshelf.core.permissions.dependencies``.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookshelf.core.auth.backend import decode_token
from bookshelf.core.auth.schemas import TokenData
from bookshelf.core.constants import TOKEN_TYPE_ACCESS
from bookshelf.core.errors import ForbiddenError, UnauthorizedError
from bookshelf.modules.users.models import User
from bookshelf.modules.users.repos import UserRepo


# auto_error=False so a missing header is reported as a problem document
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Access token returned by POST /api/v1/login",
)

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


async def get_token_data(credentials: BearerCredentials) -> TokenData:
    """Decode the bearer token and check that it is an access token.

    Raises:
        UnauthorizedError: With code ``missing_token``, ``invalid_token``
            or ``invalid_token_type``
    """
    if credentials is None:
        raise UnauthorizedError("Missing authentication token", error_code="missing_token")

    token_data = decode_token(credentials.credentials)
    if token_data is None:
        raise UnauthorizedError("Invalid or expired token", error_code="invalid_token")
    if token_data.type != TOKEN_TYPE_ACCESS:
        raise UnauthorizedError("Invalid token type", error_code="invalid_token_type")

    return token_data


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    users: UserRepo,
) -> User:
    """Load the token's user.

    A token that outlives its user is treated like any other bad token.

    Raises:
        UnauthorizedError: If the user no longer exists
        ForbiddenError: If the user is deactivated
    """
    user = await users.get_by_id(token_data.user_id)
    if user is None:
        raise UnauthorizedError("User not found", error_code="user_not_found")
    if not user.is_active:
        raise ForbiddenError("User account is deactivated", error_code="user_inactive")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
