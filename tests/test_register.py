"""Tests for the signup endpoint."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from app.core.database import get_session
from app.core.security import verify_password
from app.main import app
from app.models.company import Company
from app.models.user import User


async def _register(client: AsyncClient, company_id: str, email: str, company_name: str = "Acme"):
    """Helper: POST /register and return the response."""
    return await client.post("/register", json={
        "company_id": company_id,
        "company_name": company_name,
        "email": email,
        "password": "pw",
    })


@pytest.mark.asyncio
async def test_first_user_becomes_active_admin(client: AsyncClient):
    resp = await _register(client, "c1", "a@x.com")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["role"] == "admin"
    assert data["status"] == "active"
    assert data["message"]


@pytest.mark.asyncio
async def test_later_users_are_pending_staff(client: AsyncClient):
    await _register(client, "c1", "a@x.com")

    for email in ("b@x.com", "c@x.com"):
        resp = await _register(client, "c1", email)
        assert resp.status_code == 200
        assert resp.json() == {
            "message": "Registration complete",
            "role": "staff",
            "status": "pending",
        }


@pytest.mark.asyncio
async def test_first_user_of_each_company_is_admin(client: AsyncClient):
    await _register(client, "c1", "a@x.com")
    resp = await _register(client, "c2", "a@y.com", company_name="Beta")
    assert resp.json()["role"] == "admin"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["company_id", "company_name", "email", "password"])
async def test_missing_field_rejected_without_side_effects(client: AsyncClient, session, field):
    body = {
        "company_id": "c-missing",
        "company_name": "Missing Co",
        "email": "a@x.com",
        "password": "pw",
    }
    del body[field]

    resp = await client.post("/register", json=body)
    assert resp.status_code == 400
    assert "message" in resp.json()

    assert (await session.execute(select(func.count()).select_from(Company))).scalar_one() == 0
    assert (await session.execute(select(func.count()).select_from(User))).scalar_one() == 0


@pytest.mark.asyncio
async def test_empty_field_counts_as_missing(client: AsyncClient):
    resp = await client.post("/register", json={
        "company_id": "c1",
        "company_name": "Acme",
        "email": "",
        "password": "pw",
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_existing_company_name_not_updated(client: AsyncClient, session):
    await _register(client, "c1", "a@x.com", company_name="Acme")
    await _register(client, "c1", "b@x.com", company_name="Renamed")

    company = await session.get(Company, "c1")
    assert company.name == "Acme"


@pytest.mark.asyncio
async def test_password_stored_hashed(client: AsyncClient, session):
    await _register(client, "c1", "a@x.com")

    user = (await session.execute(select(User).where(User.email == "a@x.com"))).scalar_one()
    assert user.password_hash != "pw"
    assert user.password_hash.startswith("$2b$")
    assert verify_password("pw", user.password_hash)


@pytest.mark.asyncio
async def test_duplicate_email_allowed(client: AsyncClient):
    """Email is not unique: the same address can register twice."""
    await _register(client, "c1", "a@x.com")
    resp = await _register(client, "c1", "a@x.com")
    assert resp.status_code == 200
    assert resp.json()["role"] == "staff"


class _CommitFailsSession:
    """Runs every statement for real, then fails at commit time."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def commit(self):
        await self._inner.flush()
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


@pytest.mark.asyncio
async def test_failed_registration_leaves_no_company_behind(client: AsyncClient, session):
    """A failure after the company insert rolls the whole signup back."""

    async def _failing():
        yield _CommitFailsSession(session)

    app.dependency_overrides[get_session] = _failing

    resp = await _register(client, "c-fail", "a@x.com")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Registration failed"}
    assert "disk I/O error" not in resp.text

    assert await session.get(Company, "c-fail") is None
    assert (await session.execute(select(func.count()).select_from(Company))).scalar_one() == 0
    assert (await session.execute(select(func.count()).select_from(User))).scalar_one() == 0
