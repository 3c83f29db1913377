"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.services.approval_policy import ApprovalPolicy, get_approval_policy


def get_policy() -> ApprovalPolicy:
    """The configured approval policy; override in tests to swap it."""
    return get_approval_policy()


# Typed shorthand for use in route signatures
Session = Annotated[AsyncSession, Depends(get_session)]
Policy = Annotated[ApprovalPolicy, Depends(get_policy)]
ApproverId = Annotated[int | None, Header(alias="X-Approver-Id")]
