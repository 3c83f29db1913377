"""Import all models so SQLModel.metadata picks them up."""

from app.models.company import Company
from app.models.user import (
    ApproveResponse,
    RegisterRequest,
    RegisterResponse,
    User,
    UserRead,
    UserRole,
    UserStatus,
)

__all__ = [
    "ApproveResponse",
    "Company",
    "RegisterRequest",
    "RegisterResponse",
    "User",
    "UserRead",
    "UserRole",
    "UserStatus",
]
