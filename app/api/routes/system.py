"""Liveness and database connectivity endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.deps import Session
from app.services.registration import PersistenceError, check_database

router = APIRouter(tags=["system"])


@router.get("/")
async def root() -> dict:
    return {"status": "ok", "message": "SaaS backend is running"}


@router.get("/db-test")
async def db_test(session: Session):
    try:
        now = await check_database(session)
    except PersistenceError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": "Database connection failed"},
        )
    return {"status": "success", "time": now}
