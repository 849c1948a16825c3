"""Client for the hosted data service (PostgREST tables, RPC and auth endpoints)."""

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.core.exceptions import (
    DuplicateRecordError,
    ProcedureUnavailableError,
    ServiceError,
    ServiceUnavailableError,
)
from app.schemas.auth import UserIdentity

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
UNDEFINED_FUNCTION_CODES = {"PGRST202", "42883"}


class RestDataService:
    """Service to interact with the hosted data service on behalf of one user."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize hosted data service client."""
        self.access_token = access_token
        self.base_url = (base_url or settings.DATA_SERVICE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.DATA_SERVICE_KEY
        self.timeout = timeout if timeout is not None else settings.DATA_SERVICE_TIMEOUT_SECONDS
        self.transport = transport
        self.rpc_enabled = settings.DATA_SERVICE_RPC_ENABLED
        self._missing_procedures: set[str] = set()

    @property
    def headers(self) -> dict[str, str]:
        bearer = self.access_token or self.api_key
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {bearer}",
        }

    # Session

    async def get_user(self) -> UserIdentity | None:
        """
        Get the user the access token belongs to.

        Returns:
            The user, or None when there is no token or it was rejected
        """
        if not self.access_token:
            return None
        response = await self._request("GET", "/auth/v1/user")
        if response.status_code in (401, 403):
            return None
        self._raise_for_error(response)
        data = response.json()
        metadata = data.get("user_metadata") or {}
        return UserIdentity(
            id=data["id"],
            email=data.get("email"),
            display_name=metadata.get("display_name"),
        )

    async def sign_out(self) -> None:
        """Revoke the access token on the auth server."""
        if not self.access_token:
            return
        response = await self._request("POST", "/auth/v1/logout")
        # An already expired token still counts as signed out
        if response.status_code not in (401, 403):
            self._raise_for_error(response)
        self.access_token = None

    # Tables

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        """
        Insert a row with ``return=minimal``.

        Reading the row back would require SELECT permission on it, which
        access rules may deny right after insert.
        """
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=_jsonable(row),
            headers={"Prefer": "return=minimal"},
        )
        self._raise_for_error(response)

    async def select_maybe_single(
        self, table: str, columns: str, **filters: Any
    ) -> dict[str, Any] | None:
        params = {"select": columns, "limit": "2"}
        params.update({column: f"eq.{value}" for column, value in filters.items()})
        response = await self._request("GET", f"/rest/v1/{table}", params=params)
        self._raise_for_error(response)
        rows = response.json()
        if len(rows) > 1:
            raise ServiceError("JSON object requested, multiple (or no) rows returned")
        return rows[0] if rows else None

    async def list_memberships(self, user_id: str) -> list[dict[str, Any]]:
        params = {
            "select": "league_id,leagues(id,name,code,description,created_at)",
            "user_id": f"eq.{user_id}",
            "order": "joined_at.desc",
        }
        response = await self._request("GET", "/rest/v1/league_members", params=params)
        self._raise_for_error(response)
        return response.json()

    # Procedures

    def supports_procedure(self, name: str) -> bool:
        return self.rpc_enabled and name not in self._missing_procedures

    async def rpc(self, name: str, params: dict[str, Any]) -> Any:
        """
        Call a remote procedure.

        A procedure the server does not know is remembered, so later
        capability probes on this client skip it.
        """
        response = await self._request("POST", f"/rest/v1/rpc/{name}", json=_jsonable(params))
        try:
            self._raise_for_error(response)
        except ServiceError as exc:
            if response.status_code == 404 or _error_code(response) in UNDEFINED_FUNCTION_CODES:
                self._missing_procedures.add(name)
                raise ProcedureUnavailableError(exc.message) from exc
            raise
        if not response.content:
            return None
        return response.json()

    # Helpers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {**self.headers, **kwargs.pop("headers", {})}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                return await client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("data_service_unreachable method=%s path=%s detail=%s", method, path, exc)
            raise ServiceUnavailableError(str(exc) or exc.__class__.__name__) from exc

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        message = _error_message(response)
        logger.warning(
            "data_service_error status=%s path=%s detail=%s",
            response.status_code,
            response.request.url.path,
            message,
        )
        if response.status_code == 409 or _error_code(response) == UNIQUE_VIOLATION:
            raise DuplicateRecordError(message)
        raise ServiceError(message)


def _error_payload(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _error_code(response: httpx.Response) -> str | None:
    return _error_payload(response).get("code")


def _error_message(response: httpx.Response) -> str:
    payload = _error_payload(response)
    return (
        payload.get("message")
        or payload.get("msg")
        or payload.get("error_description")
        or response.text
        or response.reason_phrase
    )


def _jsonable(row: dict[str, Any]) -> dict[str, Any]:
    return {key: value.isoformat() if hasattr(value, "isoformat") else value for key, value in row.items()}
