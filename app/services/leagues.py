"""League creation and join workflows."""

import logging
import uuid
from typing import Protocol

from app.core.exceptions import (
    AlreadyMember,
    DuplicateRecordError,
    InvalidCode,
    MissingName,
    ServiceError,
    ServiceUnavailableError,
    Unauthenticated,
)
from app.models import MemberRole
from app.schemas.auth import UserIdentity
from app.schemas.league import CreatedLeague
from app.services.data_service import CREATE_LEAGUE_PROCEDURE, DataService
from app.services.invite_codes import generate_unique_code
from app.services.session import SessionContext

logger = logging.getLogger(__name__)


class CreationStrategy(Protocol):
    """Persists a new league plus its owner's ADMIN membership."""

    async def provision(
        self,
        data: DataService,
        user: UserIdentity,
        name: str,
        code: str,
        description: str | None,
    ) -> str:
        """Return the new league id."""
        ...


class AtomicProcedureStrategy:
    """Single call to the server-side procedure; both rows or neither."""

    procedure = CREATE_LEAGUE_PROCEDURE

    async def provision(
        self,
        data: DataService,
        user: UserIdentity,
        name: str,
        code: str,
        description: str | None,
    ) -> str:
        league_id = await data.rpc(
            self.procedure,
            {"name": name, "code": code, "description": description},
        )
        if not league_id:
            raise ServiceError(f"{self.procedure} did not return a league id")
        return str(league_id)


class TwoStepInsertStrategy:
    """League insert followed by a separate membership insert.

    The inserts are independent calls with no compensation: when the
    membership insert fails the league row stays behind without members.
    """

    async def provision(
        self,
        data: DataService,
        user: UserIdentity,
        name: str,
        code: str,
        description: str | None,
    ) -> str:
        league_id = str(uuid.uuid4())
        await data.insert(
            "leagues",
            {
                "id": league_id,
                "name": name,
                "description": description,
                "code": code,
                "owner_id": user.id,
            },
        )
        try:
            await data.insert(
                "league_members",
                {"league_id": league_id, "user_id": user.id, "role": MemberRole.ADMIN.value},
            )
        except ServiceError:
            logger.error("orphaned_league league_id=%s owner_id=%s", league_id, user.id)
            raise
        return league_id


class FallbackStrategy:
    """Try ``primary``; when the data service rejects it run ``fallback`` instead.

    An unreachable service or a timeout is re-raised: the primary call may
    already have been applied, and a second attempt would duplicate the league.
    """

    def __init__(self, primary: CreationStrategy, fallback: CreationStrategy) -> None:
        self.primary = primary
        self.fallback = fallback

    async def provision(
        self,
        data: DataService,
        user: UserIdentity,
        name: str,
        code: str,
        description: str | None,
    ) -> str:
        try:
            return await self.primary.provision(data, user, name, code, description)
        except ServiceUnavailableError:
            raise
        except ServiceError as exc:
            logger.warning(
                "creation_fallback strategy=%s reason=%s",
                type(self.primary).__name__,
                exc.message,
            )
            return await self.fallback.provision(data, user, name, code, description)


def select_creation_strategy(data: DataService) -> CreationStrategy:
    """Pick the creation strategy from the data service's capability probe."""
    if data.supports_procedure(AtomicProcedureStrategy.procedure):
        return FallbackStrategy(AtomicProcedureStrategy(), TwoStepInsertStrategy())
    return TwoStepInsertStrategy()


async def create_league(
    session: SessionContext,
    name: str,
    description: str | None = None,
    strategy: CreationStrategy | None = None,
) -> CreatedLeague:
    """
    Create a league owned by the signed-in user.

    Args:
        session: Session of the caller
        name: League name (required)
        description: Optional description; blank is stored as null
        strategy: Creation strategy; chosen by capability probe when None

    Returns:
        The new league id and its invite code
    """
    user = await session.get_user()
    if user is None:
        raise Unauthenticated()

    name = name.strip()
    if not name:
        raise MissingName()
    description = (description or "").strip() or None

    data = session.data
    code = await generate_unique_code(data)
    strategy = strategy or select_creation_strategy(data)
    league_id = await strategy.provision(data, user, name, code, description)

    logger.info("league_created league_id=%s code=%s owner_id=%s", league_id, code, user.id)
    return CreatedLeague(id=league_id, code=code)


async def join_league(session: SessionContext, code: str) -> str:
    """
    Add the signed-in user to the league with invite ``code`` as MEMBER.

    The membership existence check and the insert are separate calls. Two
    concurrent joins can both pass the check; a store with a unique
    constraint on (league_id, user_id) rejects the second insert, which is
    reported as AlreadyMember.

    Returns:
        The joined league id
    """
    user = await session.get_user()
    if user is None:
        raise Unauthenticated()

    data = session.data
    normalized = code.strip().upper()
    league = await data.select_maybe_single("leagues", "id", code=normalized) if normalized else None
    if league is None:
        raise InvalidCode()
    league_id = str(league["id"])

    existing = await data.select_maybe_single(
        "league_members", "id", league_id=league_id, user_id=user.id
    )
    if existing is not None:
        raise AlreadyMember()

    try:
        await data.insert(
            "league_members",
            {"league_id": league_id, "user_id": user.id, "role": MemberRole.MEMBER.value},
        )
    except DuplicateRecordError as exc:
        raise AlreadyMember() from exc

    logger.info("league_joined league_id=%s user_id=%s", league_id, user.id)
    return league_id
