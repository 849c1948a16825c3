"""Session routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_session_context
from app.schemas.auth import AuthSession, RedirectOut, SignInRequest
from app.services.session import SessionContext
from app.services.sql_data_service import SqlDataService
from app.views import DashboardView, Navigator

router = APIRouter()


@router.post("/sessions", response_model=AuthSession, status_code=status.HTTP_201_CREATED)
async def sign_in(
    payload: SignInRequest,
    session: SessionContext = Depends(get_session_context),
) -> AuthSession:
    """Development sign-in; only the local store issues tokens."""
    if not isinstance(session.data, SqlDataService):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sign-in is handled by the hosted auth service",
        )
    return await session.data.sign_in(payload.email, payload.display_name)


@router.post("/sign-out", response_model=RedirectOut)
async def sign_out(session: SessionContext = Depends(get_session_context)) -> RedirectOut:
    """Sign out from the dashboard and return where the client should go."""
    navigator = Navigator()
    view = DashboardView(session, navigator, lambda notification: None)
    await view.sign_out()
    return RedirectOut(redirect_to=navigator.location)
