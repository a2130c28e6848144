"""Authentication dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.app.api.dependencies.storage import StorageDep
from src.app.core.logging import bind_user_context
from src.app.core.security import ACCESS_TOKEN_TYPE, decode_token
from src.app.models import User
from src.app.services.user_service import UserService


async def _validate_access_token(authorization: str | None, user_service: UserService) -> User:
    """Validate a bearer access token and return its active user.

    Validates: header format, token decode, token type, subject, user exists + active.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(authorization[7:])
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user_uuid = UUID(user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user_id in token",
        ) from e

    user = await user_service.get_by_id(user_uuid)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    bind_user_context(user.id, user.username, user.email)
    return user


async def get_current_user(
    storage: StorageDep,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate access token and return current user."""
    return await _validate_access_token(authorization, UserService(storage))


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_optional_user(
    storage: StorageDep,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Current user when a token is sent, None for anonymous callers.

    A token that is present but invalid is still rejected.
    """
    if authorization is None:
        return None
    return await _validate_access_token(authorization, UserService(storage))


OptionalUser = Annotated[User | None, Depends(get_optional_user)]
