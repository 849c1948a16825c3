"""Dashboard routes."""

from fastapi import APIRouter, Depends

from app.api.deps import get_session_context, mounted_dashboard
from app.schemas.league import DashboardOut
from app.services.session import SessionContext

router = APIRouter()


@router.get("", response_model=DashboardOut)
async def get_dashboard(session: SessionContext = Depends(get_session_context)) -> DashboardOut:
    """Get the signed-in user's leagues, most recently joined first."""
    async with mounted_dashboard(session) as (view, notifications):
        dashboard = view.render()
    dashboard.notifications = notifications
    return dashboard
