"""Tests for the dashboard view."""

import asyncio
from datetime import datetime, timedelta

import pytest

from app.services.leagues import create_league
from app.services.session import SessionContext
from app.services.sql_data_service import SqlDataService
from app.views.dashboard import DashboardView
from app.views.navigation import Navigator


class CountingDataService(SqlDataService):
    """Counts membership list calls."""

    list_calls = 0

    async def list_memberships(self, user_id):
        type(self).list_calls += 1
        return await super().list_memberships(user_id)


class GatedDataService(SqlDataService):
    """Holds the membership list response until released."""

    started: asyncio.Event
    release: asyncio.Event

    async def list_memberships(self, user_id):
        rows = await super().list_memberships(user_id)
        self.started.set()
        await self.release.wait()
        return rows


def make_view(session):
    notifications = []
    view = DashboardView(session, Navigator(), notifications.append)
    return view, notifications


@pytest.mark.anyio
async def test_no_session_redirects_without_loading(session_factory) -> None:
    """Test a visitor without session is sent to auth and nothing is loaded."""
    CountingDataService.list_calls = 0
    session = SessionContext(CountingDataService(session_factory=session_factory))
    view, _ = make_view(session)

    await view.activate()

    assert view.navigator.location == "/auth"
    assert CountingDataService.list_calls == 0
    assert view.leagues == []


@pytest.mark.anyio
async def test_empty_dashboard_shows_empty_state(make_session) -> None:
    """Test a user without memberships gets the empty state."""
    session = await make_session(display_name="Ana")
    view, _ = make_view(session)

    await view.activate()
    state = view.render()

    assert state.is_empty is True
    assert state.is_loading is False
    assert state.leagues == []
    assert state.greeting == "Hola, Ana!"
    assert view.navigator.location is None


@pytest.mark.anyio
async def test_leagues_ordered_by_join_time_descending(make_session) -> None:
    """Test memberships joined at T1 < T2 < T3 render as [T3, T2, T1]."""
    session = await make_session()
    user = await session.get_user()
    t1 = datetime(2025, 1, 1, 12, 0)
    for index, name in enumerate(["Primera", "Segunda", "Tercera"]):
        league_id = f"league-{index}"
        await session.data.insert(
            "leagues",
            {"id": league_id, "name": name, "code": f"CODE0{index}", "owner_id": "x"},
        )
        await session.data.insert(
            "league_members",
            {
                "league_id": league_id,
                "user_id": user.id,
                "role": "MEMBER",
                "joined_at": t1 + timedelta(hours=index),
            },
        )
    view, _ = make_view(session)

    await view.activate()

    assert [league.name for league in view.leagues] == ["Tercera", "Segunda", "Primera"]


@pytest.mark.anyio
async def test_cards_use_placeholder_for_missing_description(make_session) -> None:
    """Test a league without description shows the placeholder and its code."""
    session = await make_session()
    created = await create_league(session, "Amigos FC", "")
    view, _ = make_view(session)

    await view.activate()
    card = view.render().leagues[0]

    assert card.name == "Amigos FC"
    assert card.description == "Sin descripción"
    assert card.code == created.code
    assert card.href == f"/leagues/{created.id}"


@pytest.mark.anyio
async def test_dialog_completion_reloads_list(make_session) -> None:
    """Test creating a league through the view's dialog refreshes the list."""
    session = await make_session()
    view, _ = make_view(session)
    await view.activate()
    assert view.leagues == []

    view.open_create_dialog()
    view.create_dialog.name = "Amigos FC"
    await view.create_dialog.submit()

    assert view.show_create_dialog is False
    assert [league.name for league in view.leagues] == ["Amigos FC"]


@pytest.mark.anyio
async def test_sign_out_redirects_home(make_session) -> None:
    """Test sign-out ends the session and navigates to the entry page."""
    session = await make_session()
    view, _ = make_view(session)
    await view.activate()

    await view.sign_out()

    assert view.navigator.history == ["/auth", "/"]
    assert await session.get_session() is None
    view.deactivate()


@pytest.mark.anyio
async def test_deactivate_unsubscribes(make_session) -> None:
    """Test session changes after deactivation no longer reach the view."""
    session = await make_session()
    view, _ = make_view(session)
    await view.activate()
    view.deactivate()

    await session.sign_out()

    assert view.navigator.history == []


@pytest.mark.anyio
async def test_late_load_after_sign_out_is_not_rendered(make_session) -> None:
    """Test a league load finishing after session loss is discarded."""
    session = await make_session(data_class=GatedDataService)
    await create_league(session, "Amigos FC")
    session.data.started = asyncio.Event()
    session.data.release = asyncio.Event()
    view, _ = make_view(session)

    activation = asyncio.create_task(view.activate())
    await session.data.started.wait()
    await session.sign_out()
    session.data.release.set()
    await activation

    assert view.navigator.location == "/auth"
    assert view.leagues == []
    assert view.render().leagues == []
    view.deactivate()


def test_select_league_navigates_to_detail(anonymous_session) -> None:
    """Test choosing a card navigates to the league page."""
    view, _ = make_view(anonymous_session)
    view.select_league("abc")
    assert view.navigator.location == "/leagues/abc"
