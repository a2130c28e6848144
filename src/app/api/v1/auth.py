"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, status
from starlette.requests import Request

from src.app.api.dependencies import AuthServiceDep, CurrentUser, UserServiceDep
from src.app.core.rate_limit import limiter, login_limit
from src.app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from src.app.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "User registered"},
        409: {"description": "Username or email already in use"},
        422: {"description": "Validation error (weak password, invalid email)"},
    },
)
async def register(data: RegisterRequest, service: UserServiceDep) -> UserRead:
    """Register a new user account."""
    user = await service.register(data.username, data.email, data.password)
    return UserRead.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {
                "application/json": {
                    "example": {
                        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                    }
                }
            },
        },
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit(login_limit)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Authenticate user and return an access token."""
    result = await service.authenticate(login_data.email, login_data.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return result


@router.get("/me", response_model=UserRead)
async def me(current_user: CurrentUser) -> UserRead:
    """Get the authenticated user's profile."""
    return UserRead.model_validate(current_user)
