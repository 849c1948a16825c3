"""Request dependencies."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Unauthenticated
from app.database import SessionLocal
from app.schemas.league import Notification
from app.services.data_service import DataService
from app.services.rest_data_service import RestDataService
from app.services.session import SessionContext
from app.services.sql_data_service import SqlDataService
from app.views import DashboardView, Navigator


def get_access_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the bearer token, if any."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def get_session_factory() -> Callable[[], Session]:
    return SessionLocal


def get_data_service(
    access_token: str | None = Depends(get_access_token),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> DataService:
    """Data service bound to the caller's token, per DATA_BACKEND."""
    if settings.DATA_BACKEND == "rest":
        return RestDataService(access_token=access_token)
    return SqlDataService(access_token=access_token, session_factory=session_factory)


def get_session_context(data: DataService = Depends(get_data_service)) -> SessionContext:
    return SessionContext(data)


@asynccontextmanager
async def mounted_dashboard(
    session: SessionContext,
) -> AsyncIterator[tuple[DashboardView, list[Notification]]]:
    """Activate a dashboard for the request and deactivate it afterwards.

    Raises Unauthenticated when activation sent the user to the auth entry point.
    """
    notifications: list[Notification] = []
    view = DashboardView(session, Navigator(), notifications.append)
    await view.activate()
    try:
        if view.navigator.sent_to_auth:
            raise Unauthenticated()
        yield view, notifications
    finally:
        view.deactivate()
