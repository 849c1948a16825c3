"""League routes: the create and join dialogs."""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_session_context, mounted_dashboard
from app.schemas.league import LeagueCreate, LeagueCreatedOut, LeagueJoin, LeagueJoinedOut
from app.services.session import SessionContext

router = APIRouter()


@router.post("", response_model=LeagueCreatedOut, status_code=status.HTTP_201_CREATED)
async def create_league(
    payload: LeagueCreate,
    session: SessionContext = Depends(get_session_context),
) -> LeagueCreatedOut:
    """Create a league and return its invite code with the refreshed dashboard."""
    async with mounted_dashboard(session) as (view, notifications):
        view.open_create_dialog()
        dialog = view.create_dialog
        dialog.name = payload.name
        dialog.description = payload.description or ""

        first = len(notifications)
        created = await dialog.submit()
        if created is None:
            raise dialog.error
        dashboard = view.render()

    return LeagueCreatedOut(
        league=created,
        notification=notifications[first],
        dashboard=dashboard,
    )


@router.post("/join", response_model=LeagueJoinedOut)
async def join_league(
    payload: LeagueJoin,
    session: SessionContext = Depends(get_session_context),
) -> LeagueJoinedOut:
    """Join a league by invite code."""
    async with mounted_dashboard(session) as (view, notifications):
        view.open_join_dialog()
        dialog = view.join_dialog
        dialog.code = payload.code

        first = len(notifications)
        league_id = await dialog.submit()
        if league_id is None:
            raise dialog.error
        dashboard = view.render()

    return LeagueJoinedOut(
        league_id=league_id,
        notification=notifications[first],
        dashboard=dashboard,
    )
