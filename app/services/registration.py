"""Signup and approval workflows.

Registration decides a new user's role from the number of users already in
the company: the first one becomes an active admin, everyone after that is
pending staff until approved.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from starlette.concurrency import run_in_threadpool

from app.core.database import company_lock
from app.core.security import hash_password
from app.models.base import utcnow
from app.models.company import Company
from app.models.user import User, UserRole, UserStatus
from app.services.approval_policy import ApprovalPolicy, get_approval_policy

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("company_id", "company_name", "email", "password")


# ── Errors ────────────────────────────────────────────────────

class RegistrationError(Exception):
    """Base class for workflow failures."""


class MissingFieldError(RegistrationError):
    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class UserNotFoundError(RegistrationError):
    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class ApprovalDeniedError(RegistrationError):
    pass


class PersistenceError(RegistrationError):
    pass


@dataclass(frozen=True)
class RegistrationResult:
    user_id: int
    role: UserRole
    status: UserStatus


# ── Workflows ─────────────────────────────────────────────────

def role_for_user_count(count: int) -> UserRole:
    return UserRole.ADMIN if count == 0 else UserRole.STAFF


def initial_status(role: UserRole) -> UserStatus:
    return UserStatus.ACTIVE if role == UserRole.ADMIN else UserStatus.PENDING


async def register_user(
    session: AsyncSession,
    company_id: str | None,
    company_name: str | None,
    email: str | None,
    password: str | None,
    *,
    hash_rounds: int | None = None,
) -> RegistrationResult:
    """Create the company if needed, then add a user with a derived role.

    Company lookup, user count and insert run in one transaction under a
    per-company lock, so two first signups cannot both become admin.
    """
    values = {
        "company_id": company_id,
        "company_name": company_name,
        "email": email,
        "password": password,
    }
    missing = [name for name in REQUIRED_FIELDS if not values[name]]
    if missing:
        raise MissingFieldError(missing)

    # bcrypt is CPU bound; keep it off the event loop
    password_hash = await run_in_threadpool(hash_password, password, rounds=hash_rounds)

    try:
        async with company_lock(session, company_id):
            company = await session.get(Company, company_id)
            if company is None:
                session.add(Company(company_id=company_id, name=company_name))
                await session.flush()

            count = (
                await session.execute(
                    select(func.count()).select_from(User).where(User.company_id == company_id)
                )
            ).scalar_one()

            role = role_for_user_count(count)
            user = User(
                company_id=company_id,
                email=email,
                password_hash=password_hash,
                role=role,
                status=initial_status(role),
            )
            session.add(user)
            await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Registration failed for company %s", company_id)
        raise PersistenceError("Registration failed") from exc

    logger.info("Registered user %s in company %s as %s", user.id, company_id, role)
    return RegistrationResult(user_id=user.id, role=role, status=user.status)


async def list_pending_users(session: AsyncSession, company_id: str) -> list[User]:
    """Pending users of one company, oldest first."""
    stmt = (
        select(User)
        .where(User.company_id == company_id, User.status == UserStatus.PENDING)
        .order_by(User.id.asc())  # type: ignore[union-attr]
    )
    try:
        result = await session.execute(stmt)
    except SQLAlchemyError as exc:
        logger.exception("Listing pending users failed for company %s", company_id)
        raise PersistenceError("Could not load pending users") from exc
    return list(result.scalars().all())


async def approve_user(
    session: AsyncSession,
    user_id: int,
    *,
    approver_id: int | None = None,
    policy: ApprovalPolicy | None = None,
) -> User:
    """Mark a user active. Approving an already active user is a no-op."""
    policy = policy or get_approval_policy()
    try:
        user = await session.get(User, user_id)
        if user is None:
            logger.warning("Approval requested for unknown user %s", user_id)
            raise UserNotFoundError(user_id)

        if not await policy(session, user, approver_id):
            logger.warning("Approval of user %s denied for approver %s", user_id, approver_id)
            raise ApprovalDeniedError("Not allowed to approve this user")

        user.status = UserStatus.ACTIVE
        user.updated_at = utcnow()
        session.add(user)
        await session.commit()
        await session.refresh(user)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Approval failed for user %s", user_id)
        raise PersistenceError("Approval failed") from exc

    logger.info("Approved user %s", user_id)
    return user


async def check_database(session: AsyncSession):
    """Round-trip to the database; returns the server's current time."""
    try:
        return (await session.execute(select(func.now()))).scalar_one()
    except SQLAlchemyError as exc:
        logger.exception("Database connectivity check failed")
        raise PersistenceError("Database connection failed") from exc
