"""Tests for the league creation and join workflows."""

import re

import pytest

from app.core.exceptions import (
    AlreadyMember,
    InvalidCode,
    MissingName,
    ServiceError,
    Unauthenticated,
)
from app.services.leagues import (
    AtomicProcedureStrategy,
    FallbackStrategy,
    TwoStepInsertStrategy,
    create_league,
    join_league,
    select_creation_strategy,
)
from app.services.sql_data_service import SqlDataService


class BrokenProcedureDataService(SqlDataService):
    """Advertises the procedure but every call fails."""

    async def rpc(self, name, params):
        raise ServiceError("function failed")


class FailingMembershipDataService(SqlDataService):
    """League inserts succeed, membership inserts fail."""

    async def insert(self, table, row):
        if table == "league_members":
            raise ServiceError("permission denied for table league_members")
        await super().insert(table, row)


class SkippedCheckDataService(SqlDataService):
    """Membership existence check always misses, as in two racing joins."""

    async def select_maybe_single(self, table, columns, **filters):
        if table == "league_members":
            return None
        return await super().select_maybe_single(table, columns, **filters)


@pytest.mark.anyio
@pytest.mark.parametrize("procedures_enabled", [True, False])
async def test_create_league_writes_league_and_admin_membership(
    make_session, db_rows, procedures_enabled
) -> None:
    """Test creation yields one league and one ADMIN membership on both paths."""
    session = await make_session(procedures_enabled=procedures_enabled)
    user = await session.get_user()

    created = await create_league(session, "Amigos FC", "Liga del barrio")

    leagues, members = db_rows()
    assert len(leagues) == 1
    assert len(members) == 1
    assert leagues[0].id == created.id
    assert leagues[0].code == created.code
    assert leagues[0].owner_id == user.id
    assert leagues[0].description == "Liga del barrio"
    assert members[0].league_id == created.id
    assert members[0].user_id == user.id
    assert members[0].role == "ADMIN"


@pytest.mark.anyio
async def test_create_league_with_empty_description(make_session, db_rows) -> None:
    """Test an empty description is stored as absent and the code has six chars."""
    session = await make_session()

    created = await create_league(session, "Amigos FC", "")

    leagues, _ = db_rows()
    assert leagues[0].description is None
    assert re.fullmatch(r"[0-9A-Z]{6}", created.code)


@pytest.mark.anyio
async def test_create_league_requires_session(anonymous_session, db_rows) -> None:
    """Test creating without a session fails and writes nothing."""
    with pytest.raises(Unauthenticated):
        await create_league(anonymous_session, "Amigos FC")
    assert db_rows() == ([], [])


@pytest.mark.anyio
async def test_create_league_rejects_blank_name(make_session, db_rows) -> None:
    """Test a whitespace-only name is rejected."""
    session = await make_session()
    with pytest.raises(MissingName):
        await create_league(session, "   ")
    assert db_rows() == ([], [])


def test_strategy_selection_follows_capability_probe(session_factory) -> None:
    """Test the atomic path is only tried when the probe says it exists."""
    with_rpc = select_creation_strategy(
        SqlDataService(session_factory=session_factory, procedures_enabled=True)
    )
    without_rpc = select_creation_strategy(
        SqlDataService(session_factory=session_factory, procedures_enabled=False)
    )

    assert isinstance(with_rpc, FallbackStrategy)
    assert isinstance(with_rpc.primary, AtomicProcedureStrategy)
    assert isinstance(with_rpc.fallback, TwoStepInsertStrategy)
    assert isinstance(without_rpc, TwoStepInsertStrategy)


@pytest.mark.anyio
async def test_failed_procedure_falls_back_to_two_inserts(make_session, db_rows) -> None:
    """Test an erroring procedure falls back to the two-step inserts."""
    session = await make_session(data_class=BrokenProcedureDataService)

    created = await create_league(session, "Amigos FC")

    leagues, members = db_rows()
    assert [league.id for league in leagues] == [created.id]
    assert [member.role for member in members] == ["ADMIN"]


@pytest.mark.anyio
async def test_membership_failure_leaves_orphaned_league(make_session, db_rows) -> None:
    """Test the two-step path does not compensate a failed membership insert."""
    session = await make_session(
        procedures_enabled=False, data_class=FailingMembershipDataService
    )

    with pytest.raises(ServiceError, match="permission denied"):
        await create_league(session, "Amigos FC")

    leagues, members = db_rows()
    assert len(leagues) == 1
    assert members == []


@pytest.mark.anyio
async def test_join_league_adds_member(make_session, db_rows) -> None:
    """Test joining by code adds a MEMBER membership."""
    owner = await make_session("owner@example.com")
    created = await create_league(owner, "Amigos FC")
    guest = await make_session("guest@example.com")
    guest_user = await guest.get_user()

    league_id = await join_league(guest, created.code.lower())

    assert league_id == created.id
    _, members = db_rows()
    guest_members = [m for m in members if m.user_id == guest_user.id]
    assert len(guest_members) == 1
    assert guest_members[0].role == "MEMBER"


@pytest.mark.anyio
async def test_join_unknown_code_fails(make_session, db_rows) -> None:
    """Test an unknown code fails with InvalidCode and writes nothing."""
    session = await make_session()

    with pytest.raises(InvalidCode):
        await join_league(session, "ZZZZZZ")
    assert db_rows() == ([], [])


@pytest.mark.anyio
async def test_join_twice_keeps_single_membership(make_session, db_rows) -> None:
    """Test the second join fails with AlreadyMember."""
    owner = await make_session("owner@example.com")
    created = await create_league(owner, "Amigos FC")
    guest = await make_session("guest@example.com")

    await join_league(guest, created.code)
    with pytest.raises(AlreadyMember):
        await join_league(guest, created.code)

    _, members = db_rows()
    assert len(members) == 2


@pytest.mark.anyio
async def test_owner_joining_own_league_is_already_member(make_session) -> None:
    """Test the creator already holds a membership."""
    owner = await make_session()
    created = await create_league(owner, "Amigos FC")

    with pytest.raises(AlreadyMember):
        await join_league(owner, created.code)


@pytest.mark.anyio
async def test_racing_join_is_stopped_by_unique_constraint(make_session, db_rows) -> None:
    """Test a join that slips past the existence check still reports AlreadyMember."""
    owner = await make_session("owner@example.com")
    created = await create_league(owner, "Amigos FC")
    guest = await make_session("guest@example.com", data_class=SkippedCheckDataService)

    await join_league(guest, created.code)
    with pytest.raises(AlreadyMember):
        await join_league(guest, created.code)

    _, members = db_rows()
    assert len(members) == 2


@pytest.mark.anyio
async def test_join_requires_session(anonymous_session) -> None:
    """Test joining without a session fails."""
    with pytest.raises(Unauthenticated):
        await join_league(anonymous_session, "ABC123")
