"""Shared fixtures: in-memory database and signed-in sessions."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.deps import get_session_factory
from app.database import Base
from app.main import app as fastapi_app
from app.models import League, LeagueMember
from app.services.session import SessionContext
from app.services.sql_data_service import SqlDataService


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def override_session_factory(session_factory):
    fastapi_app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_session(session_factory):
    """Build a signed-in SessionContext over the test database."""

    async def _make(
        email: str = "ana@example.com",
        display_name: str | None = "Ana",
        procedures_enabled: bool = True,
        data_class: type[SqlDataService] = SqlDataService,
    ) -> SessionContext:
        data = data_class(session_factory=session_factory, procedures_enabled=procedures_enabled)
        await data.sign_in(email, display_name)
        return SessionContext(data)

    return _make


@pytest.fixture
def anonymous_session(session_factory) -> SessionContext:
    return SessionContext(SqlDataService(session_factory=session_factory))


@pytest.fixture
def db_rows(session_factory):
    """Return all leagues and memberships currently stored."""

    def _rows() -> tuple[list[League], list[LeagueMember]]:
        with session_factory() as db:
            return db.query(League).all(), db.query(LeagueMember).all()

    return _rows
