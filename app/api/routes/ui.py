"""Server-rendered HTML fallback for the pending-user queue."""

from html import escape
from urllib.parse import urlencode

from fastapi import APIRouter, Form, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from app.api.deps import Policy, Session
from app.models.user import User
from app.services.registration import (
    ApprovalDeniedError,
    PersistenceError,
    UserNotFoundError,
    approve_user,
    list_pending_users,
)

router = APIRouter(prefix="/ui", tags=["ui"], include_in_schema=False)

_PROMPT = """<h3>Open this page with a company_id</h3>
<p>Example: <a href="/ui/pending?company_id=company001">/ui/pending?company_id=company001</a></p>"""


def _parse_id(raw: str | None) -> int | None:
    """Form ids arrive as text; None when absent or not a plain integer."""
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _row(user: User, company_id: str, approver_id: int | None) -> str:
    approver = "" if approver_id is None else str(approver_id)
    return f"""
      <tr>
        <td>{user.id}</td>
        <td>{escape(user.email)}</td>
        <td>{escape(str(user.role))}</td>
        <td>{escape(str(user.status))}</td>
        <td>
          <form method="POST" action="/ui/approve">
            <input type="hidden" name="user_id" value="{user.id}" />
            <input type="hidden" name="company_id" value="{escape(company_id)}" />
            <input type="hidden" name="approver_id" value="{approver}" />
            <button type="submit">Approve</button>
          </form>
        </td>
      </tr>"""


def render_pending_page(company_id: str, users: list[User], approver_id: int | None = None) -> str:
    rows = "".join(_row(u, company_id, approver_id) for u in users)
    if not rows:
        rows = '<tr><td colspan="5">No users awaiting approval</td></tr>'
    approver = "" if approver_id is None else str(approver_id)
    return f"""
    <h2>Pending users ({escape(company_id)})</h2>
    <p><a href="/">/</a> | <a href="/db-test">db-test</a> | <a href="/dashboard/">dashboard</a></p>
    <form method="GET" action="/ui/pending">
      <input type="hidden" name="company_id" value="{escape(company_id)}" />
      <label>Approver ID <input name="approver_id" value="{approver}" /></label>
      <button type="submit">Use</button>
    </form>
    <table border="1" cellpadding="6" cellspacing="0">
      <thead>
        <tr><th>ID</th><th>Email</th><th>Role</th><th>Status</th><th>Action</th></tr>
      </thead>
      <tbody>{rows}
      </tbody>
    </table>
    """


def _server_error() -> PlainTextResponse:
    return PlainTextResponse(
        "internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


@router.get("/pending", response_class=HTMLResponse)
async def pending_page(
    session: Session,
    company_id: str | None = None,
    approver_id: str | None = None,
):
    if not company_id:
        return HTMLResponse(_PROMPT)
    try:
        users = await list_pending_users(session, company_id)
    except PersistenceError:
        return _server_error()
    return HTMLResponse(render_pending_page(company_id, users, _parse_id(approver_id)))


@router.post("/approve")
async def approve_form(
    session: Session,
    policy: Policy,
    user_id: str | None = Form(None),
    company_id: str | None = Form(None),
    approver_id: str | None = Form(None),
):
    target_id = _parse_id(user_id)
    approver = _parse_id(approver_id)
    if target_id is None or not company_id or (approver_id and approver is None):
        return PlainTextResponse("bad request", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await approve_user(session, target_id, approver_id=approver, policy=policy)
    except UserNotFoundError:
        # Already gone from the queue; fall through to the refreshed list
        pass
    except ApprovalDeniedError:
        return PlainTextResponse("forbidden", status_code=status.HTTP_403_FORBIDDEN)
    except PersistenceError:
        return _server_error()

    query = {"company_id": company_id}
    if approver is not None:
        query["approver_id"] = str(approver)
    return RedirectResponse(
        f"/ui/pending?{urlencode(query)}",
        status_code=status.HTTP_303_SEE_OTHER,
    )
