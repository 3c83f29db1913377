"""Who may approve a pending user.

The default ``open`` policy lets any caller approve any user. The stricter
``company_admin`` policy requires the approver to be an active admin of the
target user's company.
"""

from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.user import User, UserRole, UserStatus

ApprovalPolicy = Callable[[AsyncSession, User, int | None], Awaitable[bool]]


async def allow_any(session: AsyncSession, target: User, approver_id: int | None) -> bool:
    return True


async def require_company_admin(
    session: AsyncSession, target: User, approver_id: int | None
) -> bool:
    if approver_id is None:
        return False
    approver = await session.get(User, approver_id)
    return (
        approver is not None
        and approver.company_id == target.company_id
        and approver.role == UserRole.ADMIN
        and approver.status == UserStatus.ACTIVE
    )


POLICIES: dict[str, ApprovalPolicy] = {
    "open": allow_any,
    "company_admin": require_company_admin,
}


def get_approval_policy(name: str | None = None) -> ApprovalPolicy:
    """Resolve a policy by name, defaulting to the configured one."""
    name = name or get_settings().approval_policy
    try:
        return POLICIES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown approval policy: {name!r}") from exc
