"""Create-league and join-league dialogs.

Each dialog keeps the user's input between submissions: a failed submit
reports the error and leaves the input untouched for a retry, a successful
one clears it and fires the completion callback once.
"""

from collections.abc import Awaitable, Callable

from app.core.exceptions import LeagueError
from app.schemas.league import CreatedLeague, Notification
from app.services.leagues import CreationStrategy, create_league, join_league
from app.services.session import SessionContext
from app.views.navigation import Notify, error_notification

OnCompleted = Callable[[], Awaitable[None]]


class CreateLeagueDialog:
    """Form state for creating a league."""

    def __init__(
        self,
        session: SessionContext,
        notify: Notify,
        on_league_created: OnCompleted,
        strategy: CreationStrategy | None = None,
    ) -> None:
        self.session = session
        self.notify = notify
        self.on_league_created = on_league_created
        self.strategy = strategy
        self.name = ""
        self.description = ""
        self.is_loading = False
        self.error: LeagueError | None = None

    async def submit(self) -> CreatedLeague | None:
        self.is_loading = True
        self.error = None
        try:
            created = await create_league(
                self.session, self.name, self.description, strategy=self.strategy
            )
        except LeagueError as exc:
            self.error = exc
            self.notify(error_notification(exc.message))
            return None
        finally:
            self.is_loading = False

        self.notify(
            Notification(
                title="¡Liga creada!",
                description=f"Tu código de liga es: {created.code}",
            )
        )
        self.name = ""
        self.description = ""
        await self.on_league_created()
        return created


class JoinLeagueDialog:
    """Form state for joining a league by invite code."""

    def __init__(
        self,
        session: SessionContext,
        notify: Notify,
        on_league_joined: OnCompleted,
    ) -> None:
        self.session = session
        self.notify = notify
        self.on_league_joined = on_league_joined
        self._code = ""
        self.is_loading = False
        self.error: LeagueError | None = None

    @property
    def code(self) -> str:
        return self._code

    @code.setter
    def code(self, value: str) -> None:
        self._code = value.upper()

    async def submit(self) -> str | None:
        self.is_loading = True
        self.error = None
        try:
            league_id = await join_league(self.session, self.code)
        except LeagueError as exc:
            self.error = exc
            self.notify(error_notification(exc.message))
            return None
        finally:
            self.is_loading = False

        self.notify(
            Notification(
                title="¡Te uniste a la liga!",
                description="Ahora puedes hacer tus pronósticos",
            )
        )
        self.code = ""
        await self.on_league_joined()
        return league_id
