"""User model — belongs to a company, starts pending unless first in."""

from enum import StrEnum

from sqlalchemy import Column, Index, String, text
from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin


class UserRole(StrEnum):
    ADMIN = "admin"
    STAFF = "staff"


class UserStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (
        # At most one admin per company, whatever the request interleaving
        Index(
            "uq_users_one_admin_per_company",
            "company_id",
            unique=True,
            postgresql_where=text("role = 'admin'"),
            sqlite_where=text("role = 'admin'"),
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    company_id: str = Field(foreign_key="companies.company_id", nullable=False, index=True)
    # Not unique: the same address may sign up under several companies
    email: str = Field(max_length=320, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(sa_column=Column(String(20), nullable=False))
    status: UserStatus = Field(sa_column=Column(String(20), nullable=False, index=True))


# ── Pydantic schemas ─────────────────────────────────────────

class RegisterRequest(SQLModel):
    """Signup body. Every field is required but checked by the workflow,
    so that an absent or empty value maps to a 400 rather than a 422."""

    company_id: str | None = None
    company_name: str | None = None
    email: str | None = None
    password: str | None = None


class RegisterResponse(SQLModel):
    message: str
    role: UserRole
    status: UserStatus


class UserRead(SQLModel):
    id: int
    email: str
    role: UserRole
    status: UserStatus


class ApproveResponse(SQLModel):
    message: str
    user: UserRead
