"""Authentication module for JWT and password handling."""

from bookshelf.core.auth.backend import (
    access_token_ttl_seconds,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from bookshelf.core.auth.dependencies import CurrentUser, get_current_user
from bookshelf.core.auth.middleware import ActorContextMiddleware, RequestIdMiddleware
from bookshelf.core.auth.routes import router as auth_router
from bookshelf.core.auth.schemas import LoginRequest, TokenData, TokenResponse
from bookshelf.core.auth.service import AuthService


__all__ = [
    # Middleware
    "ActorContextMiddleware",
    # Service
    "AuthService",
    # Dependencies
    "CurrentUser",
    # Schemas
    "LoginRequest",
    "RequestIdMiddleware",
    "TokenData",
    "TokenResponse",
    # Token utilities
    "access_token_ttl_seconds",
    # Routers
    "auth_router",
    "create_access_token",
    "decode_token",
    "get_current_user",
    # Password utilities
    "hash_password",
    "verify_password",
]
