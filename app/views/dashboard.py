"""Dashboard view: session check, league list and the create/join dialogs."""

import logging

from app.core.config import settings
from app.core.exceptions import LeagueError
from app.schemas.auth import AuthSession, UserIdentity
from app.schemas.league import DashboardOut, LeagueCard, LeagueSummary
from app.services.session import AuthEvent, SessionContext, Subscription
from app.views.dialogs import CreateLeagueDialog, JoinLeagueDialog
from app.views.navigation import Navigator, Notify, error_notification, league_path

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "Sin descripción"
DEFAULT_GREETING_NAME = "Amigo"


class DashboardView:
    """The signed-in user's leagues.

    The view listens to session changes between ``activate`` and
    ``deactivate``. Losing the session sends the user to the auth entry
    point, and a league load that finishes after that (or after
    deactivation) is dropped instead of rendered.
    """

    def __init__(self, session: SessionContext, navigator: Navigator, notify: Notify) -> None:
        self.session = session
        self.navigator = navigator
        self.notify = notify
        self.user: UserIdentity | None = None
        self.leagues: list[LeagueSummary] = []
        self.is_loading = True
        self.show_create_dialog = False
        self.show_join_dialog = False
        self.create_dialog = CreateLeagueDialog(session, notify, self.handle_league_created)
        self.join_dialog = JoinLeagueDialog(session, notify, self.handle_league_joined)
        self._subscription: Subscription | None = None
        self._active = False
        self._generation = 0

    # Lifecycle

    async def activate(self) -> None:
        self._active = True
        self._subscription = self.session.on_auth_state_change(self._on_auth_state_change)

        current = await self.session.get_session()
        if current is None:
            self.is_loading = False
            self.navigator.navigate(settings.AUTH_ENTRY_PATH)
            return
        self.user = current.user
        await self.load_leagues()

    def deactivate(self) -> None:
        self._active = False
        self._generation += 1
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_auth_state_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        self.user = session.user if session else None
        if session is None:
            self._generation += 1
            self.navigator.navigate(settings.AUTH_ENTRY_PATH)

    def _is_current(self, generation: int) -> bool:
        return self._active and generation == self._generation

    # Data

    async def load_leagues(self) -> None:
        generation = self._generation
        self.is_loading = True
        try:
            user = await self.session.get_user()
            if user is None:
                self.navigator.navigate(settings.AUTH_ENTRY_PATH)
                return
            memberships = await self.session.data.list_memberships(user.id)
        except LeagueError as exc:
            logger.error("load_leagues_failed detail=%s", exc.message)
            if self._is_current(generation):
                self.notify(error_notification(exc.message or "No se pudieron cargar las ligas"))
            return
        finally:
            self.is_loading = False

        if not self._is_current(generation):
            logger.info("load_leagues_discarded user_id=%s", user.id)
            return
        self.leagues = [
            LeagueSummary.model_validate(item["leagues"])
            for item in memberships
            if item.get("leagues")
        ]

    # Actions

    def open_create_dialog(self) -> None:
        self.show_create_dialog = True

    def open_join_dialog(self) -> None:
        self.show_join_dialog = True

    async def handle_league_created(self) -> None:
        self.show_create_dialog = False
        await self.load_leagues()

    async def handle_league_joined(self) -> None:
        self.show_join_dialog = False
        await self.load_leagues()

    def select_league(self, league_id: str) -> None:
        self.navigator.navigate(league_path(league_id))

    async def sign_out(self) -> None:
        await self.session.sign_out()
        self.navigator.navigate(settings.HOME_PATH)

    # Rendering

    def render(self) -> DashboardOut:
        name = self.user.display_name if self.user else None
        return DashboardOut(
            greeting=f"Hola, {name or DEFAULT_GREETING_NAME}!",
            is_loading=self.is_loading,
            is_empty=not self.is_loading and not self.leagues,
            leagues=[
                LeagueCard(
                    id=league.id,
                    name=league.name,
                    description=league.description or NO_DESCRIPTION,
                    code=league.code,
                    href=league_path(league.id),
                )
                for league in self.leagues
            ],
        )
