"""Authentication API routes."""

from fastapi import APIRouter

from bookshelf.core.auth.schemas import LoginRequest, TokenResponse
from bookshelf.core.auth.service import AuthSvc


router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Authenticate with email and password to receive a bearer access token.",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
) -> TokenResponse:
    """Login with email and password."""
    return await service.login(email=data.email, password=data.password)
