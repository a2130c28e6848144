from src.app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.user import UserRead, UserSummary

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    # Pagination
    "PaginatedResponse",
    # User
    "UserRead",
    "UserSummary",
]
