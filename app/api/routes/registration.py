"""Company-scoped signup endpoint."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.deps import Session
from app.models.user import RegisterRequest, RegisterResponse
from app.services.registration import MissingFieldError, PersistenceError, register_user

router = APIRouter(tags=["registration"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={400: {"description": "Missing field"}, 500: {"description": "Registration failed"}},
    summary="Register a user under a company",
)
async def register(body: RegisterRequest, session: Session):
    """Create the company on first use, then the user.

    The first user of a company becomes an active admin; later users are
    staff and wait for approval.
    """
    try:
        result = await register_user(
            session,
            body.company_id,
            body.company_name,
            body.email,
            body.password,
        )
    except MissingFieldError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Required fields are missing"},
        )
    except PersistenceError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Registration failed"},
        )

    return RegisterResponse(message="Registration complete", role=result.role, status=result.status)
