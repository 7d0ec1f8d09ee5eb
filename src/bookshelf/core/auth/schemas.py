"""Authentication schemas for login and token handling."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Attributes:
        user_id: The authenticated actor's id
        exp: Token expiration time
        type: Token type (always "access" for now)
        jti: Unique token id
    """

    user_id: int
    exp: datetime
    type: str = "access"
    jti: str | None = None


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Access token issued on successful login.

    Attributes:
        access_token: JWT for API access
        token_type: Always "bearer"
        expires_in: Access token lifetime in seconds
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int
