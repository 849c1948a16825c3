"""Session context handed to views and workflows."""

import logging
from collections.abc import Callable
from typing import Literal

from app.schemas.auth import AuthSession, UserIdentity
from app.services.data_service import DataService

logger = logging.getLogger(__name__)

AuthEvent = Literal["SIGNED_OUT"]
AuthListener = Callable[[AuthEvent, AuthSession | None], None]


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, listeners: list[AuthListener], callback: AuthListener) -> None:
        self._listeners = listeners
        self._callback = callback

    def unsubscribe(self) -> None:
        if self._callback in self._listeners:
            self._listeners.remove(self._callback)


class SessionContext:
    """Current identity plus session lifecycle notifications.

    One context is built per request from the bearer token. Listeners are
    called synchronously, in subscription order, when the session ends
    through this context. Sign-in happens before a context exists, so it
    has no event.
    """

    def __init__(self, data: DataService) -> None:
        self.data = data
        self._listeners: list[AuthListener] = []

    async def get_session(self) -> AuthSession | None:
        token = self.data.access_token
        if not token:
            return None
        user = await self.data.get_user()
        if user is None:
            return None
        return AuthSession(access_token=token, user=user)

    async def get_user(self) -> UserIdentity | None:
        return await self.data.get_user()

    async def sign_out(self) -> None:
        await self.data.sign_out()
        self._emit("SIGNED_OUT", None)

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    def _emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        logger.debug("auth_state_change event=%s listeners=%d", event, len(self._listeners))
        for listener in list(self._listeners):
            listener(event, session)
