"""Service test fixtures — async DB, user store + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched for the readiness probe
    - app.state collaborators installed directly (ASGITransport skips the lifespan)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the SQLite unique-violation
      adapter is exercised end to end, the PostgreSQL adapter with fakes
    - Real CredentialIssuer: scrypt at N=16384 costs tens of ms per derivation
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from settle.db.base import Base
from settle.core.render_email import build_credentials_template
from settle.infrastructure.credential_issuer import CredentialIssuer
from settle.infrastructure.database import get_db, DatabaseSessionManager
from settle.infrastructure.mailer import LogMailer
from settle.infrastructure.unique_violation import SqliteUniqueViolation
from settle.services.user_store import UserStore
import settle.infrastructure.database as db_module
import settle.models  # noqa: F401
from settle.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def issuer():
    return CredentialIssuer(max_concurrency=2)


@pytest.fixture
def store(test_db, issuer):
    return UserStore(test_db, issuer, SqliteUniqueViolation())


@pytest.fixture
def mailer():
    return LogMailer()


@pytest.fixture
async def client(test_engine, test_session_factory, issuer, mailer):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.issuer = issuer
    app.state.unique_classifier = SqliteUniqueViolation()
    app.state.email_template = build_credentials_template()
    app.state.mailer = mailer

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
