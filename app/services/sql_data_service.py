"""Local data service backed by SQLAlchemy."""

import logging
import secrets
import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import DuplicateRecordError, ProcedureUnavailableError, ServiceError
from app.database import SessionLocal
from app.models import AuthToken, League, LeagueMember, MemberRole, User
from app.schemas.auth import AuthSession, UserIdentity
from app.services.data_service import CREATE_LEAGUE_PROCEDURE

logger = logging.getLogger(__name__)

TABLES = {
    "leagues": League,
    "league_members": LeagueMember,
}


class SqlDataService:
    """Data service over the local database.

    Also acts as a development session provider: ``sign_in`` issues opaque
    bearer tokens for a user identified by email.
    """

    def __init__(
        self,
        access_token: str | None = None,
        session_factory: Callable[[], Session] = SessionLocal,
        procedures_enabled: bool | None = None,
    ) -> None:
        """Initialize local data service."""
        self.access_token = access_token
        self.session_factory = session_factory
        if procedures_enabled is None:
            procedures_enabled = settings.DATA_SERVICE_RPC_ENABLED
        self.procedures_enabled = procedures_enabled
        self._procedures = {
            CREATE_LEAGUE_PROCEDURE: self._create_league_with_member,
        }

    # Session

    async def sign_in(self, email: str, display_name: str | None = None) -> AuthSession:
        """Issue a token for ``email``, creating the user on first sign-in."""
        email = email.strip().lower()
        with self.session_factory() as db:
            user = db.query(User).filter(User.email == email).first()
            if user is None:
                user = User(email=email, display_name=display_name or email.split("@")[0])
                db.add(user)
                db.flush()
            elif display_name:
                user.display_name = display_name
            token = secrets.token_urlsafe(32)
            db.add(AuthToken(token=token, user_id=user.id))
            db.commit()
            identity = UserIdentity.model_validate(user)

        self.access_token = token
        logger.info("signed_in user_id=%s", identity.id)
        return AuthSession(access_token=token, user=identity)

    async def get_user(self) -> UserIdentity | None:
        if not self.access_token:
            return None
        with self.session_factory() as db:
            user = self._user_for_token(db, self.access_token)
            return UserIdentity.model_validate(user) if user else None

    async def sign_out(self) -> None:
        if not self.access_token:
            return
        with self.session_factory() as db:
            db.query(AuthToken).filter(AuthToken.token == self.access_token).delete()
            db.commit()
        self.access_token = None

    # Tables

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        model = self._model(table)
        with self.session_factory() as db:
            db.add(model(**row))
            self._commit(db)

    async def select_maybe_single(
        self, table: str, columns: str, **filters: Any
    ) -> dict[str, Any] | None:
        model = self._model(table)
        names = [name.strip() for name in columns.split(",") if name.strip()]
        with self.session_factory() as db:
            try:
                rows = db.query(model).filter_by(**filters).limit(2).all()
            except SQLAlchemyError as exc:
                raise ServiceError(str(exc)) from exc
        if len(rows) > 1:
            raise ServiceError("JSON object requested, multiple (or no) rows returned")
        if not rows:
            return None
        return {name: getattr(rows[0], name) for name in names}

    async def list_memberships(self, user_id: str) -> list[dict[str, Any]]:
        with self.session_factory() as db:
            rows = (
                db.query(LeagueMember, League)
                .outerjoin(League, League.id == LeagueMember.league_id)
                .filter(LeagueMember.user_id == user_id)
                .order_by(LeagueMember.joined_at.desc())
                .all()
            )
            return [
                {
                    "league_id": member.league_id,
                    "leagues": _league_row(league) if league else None,
                }
                for member, league in rows
            ]

    # Procedures

    def supports_procedure(self, name: str) -> bool:
        return self.procedures_enabled and name in self._procedures

    async def rpc(self, name: str, params: dict[str, Any]) -> Any:
        procedure = self._procedures.get(name) if self.procedures_enabled else None
        if procedure is None:
            raise ProcedureUnavailableError(f"Could not find the function public.{name}")
        with self.session_factory() as db:
            user = self._user_for_token(db, self.access_token) if self.access_token else None
            if user is None:
                raise ServiceError("not authenticated")
            return procedure(db, user.id, **params)

    def _create_league_with_member(
        self,
        db: Session,
        user_id: str,
        name: str,
        code: str,
        description: str | None = None,
    ) -> str:
        """Insert the league and its ADMIN membership in one transaction."""
        league_id = str(uuid.uuid4())
        db.add(
            League(
                id=league_id,
                name=name,
                code=code,
                description=description,
                owner_id=user_id,
            )
        )
        db.add(LeagueMember(league_id=league_id, user_id=user_id, role=MemberRole.ADMIN.value))
        self._commit(db)
        return league_id

    # Helpers

    @staticmethod
    def _model(table: str) -> type:
        try:
            return TABLES[table]
        except KeyError:
            raise ServiceError(f'relation "public.{table}" does not exist') from None

    @staticmethod
    def _user_for_token(db: Session, token: str) -> User | None:
        return (
            db.query(User)
            .join(AuthToken, AuthToken.user_id == User.id)
            .filter(AuthToken.token == token)
            .first()
        )

    @staticmethod
    def _commit(db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning("integrity_error detail=%s", exc.orig)
            raise DuplicateRecordError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise ServiceError(str(exc)) from exc


def _league_row(league: League) -> dict[str, Any]:
    return {
        "id": league.id,
        "name": league.name,
        "code": league.code,
        "description": league.description,
        "created_at": league.created_at,
    }
