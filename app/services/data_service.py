"""Interface of the data service the league workflows talk to.

A data service is bound to the caller's access token, the same way the
hosted client library holds the signed-in session: table reads and writes,
remote procedures and ``get_user`` all run on behalf of that user.
"""

from typing import Any, Protocol

from app.schemas.auth import UserIdentity

CREATE_LEAGUE_PROCEDURE = "create_league_with_member"


class DataService(Protocol):
    """Operations consumed from the remote data service."""

    access_token: str | None

    async def get_user(self) -> UserIdentity | None:
        """Resolve the bound access token to a user, or None."""
        ...

    async def sign_out(self) -> None:
        """Revoke the bound access token."""
        ...

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        """Insert a row without reading it back."""
        ...

    async def select_maybe_single(
        self, table: str, columns: str, **filters: Any
    ) -> dict[str, Any] | None:
        """Select at most one row matching all equality filters.

        Returns None when nothing matches and raises ``ServiceError`` when
        more than one row does.
        """
        ...

    async def list_memberships(self, user_id: str) -> list[dict[str, Any]]:
        """List the user's memberships with the joined league, newest first.

        Each item looks like ``{"league_id": ..., "leagues": {...} | None}``.
        """
        ...

    async def rpc(self, name: str, params: dict[str, Any]) -> Any:
        """Call a remote procedure and return its result."""
        ...

    def supports_procedure(self, name: str) -> bool:
        """Capability probe: whether calling ``name`` is worth trying."""
        ...
