"""Errors raised by the league workflows and data services.

Every error carries a user facing message (shown as-is in notifications)
and the HTTP status the API answers with.
"""

from fastapi import status


class LeagueError(Exception):
    """Base error for league workflows."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(LeagueError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No hay sesión activa"


class MissingName(LeagueError):
    status_code = 422
    default_message = "El nombre de la liga es obligatorio"


class InvalidCode(LeagueError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Código de liga inválido"


class AlreadyMember(LeagueError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Ya eres miembro de esta liga"


class ServiceError(LeagueError):
    """Any failure reported by the data service; the message is passed through verbatim."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Error del servicio de datos"


class DuplicateRecordError(ServiceError):
    """A unique constraint rejected an insert."""

    status_code = status.HTTP_409_CONFLICT


class ProcedureUnavailableError(ServiceError):
    """The requested remote procedure does not exist on the data service."""


class ServiceUnavailableError(ServiceError):
    """The data service could not be reached or did not answer in time.

    The outcome of the request is unknown: it may have been applied.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
