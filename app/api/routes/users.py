"""Pending-user queue and approval."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.deps import ApproverId, Policy, Session
from app.models.user import ApproveResponse, UserRead
from app.services.registration import (
    ApprovalDeniedError,
    PersistenceError,
    UserNotFoundError,
    approve_user,
    list_pending_users,
)

router = APIRouter(prefix="/users", tags=["users"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.get("/pending/{company_id}", response_model=list[UserRead])
async def list_pending(company_id: str, session: Session):
    try:
        users = await list_pending_users(session, company_id)
    except PersistenceError:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not load pending users")
    return [UserRead.model_validate(u) for u in users]


@router.post("/{user_id}/approve", response_model=ApproveResponse)
async def approve(
    user_id: int,
    session: Session,
    policy: Policy,
    approver_id: ApproverId = None,
):
    try:
        user = await approve_user(session, user_id, approver_id=approver_id, policy=policy)
    except UserNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, "User does not exist")
    except ApprovalDeniedError:
        return _error(status.HTTP_403_FORBIDDEN, "Not allowed to approve this user")
    except PersistenceError:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Approval failed")

    return ApproveResponse(message="User approved", user=UserRead.model_validate(user))
