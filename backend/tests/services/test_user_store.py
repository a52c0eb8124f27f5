"""User Store — tests for create/save/load against in-memory SQLite.

Tests cover:
    - create_user stores an unverified user with independent credentials
    - Duplicate username or email raises UniqueConstraintViolationError
    - Concurrent registrations of one username: exactly one wins, the rest conflict
    - Non-unique integrity errors are not classified as conflicts
    - save() writes status/password/mint_token only
    - load_by_username() returns None for unknown users
"""

import asyncio

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.exc import IntegrityError

from settle.core.domain_types import UserStatus
from settle.core.errors import ResourceNotFoundError, UniqueConstraintViolationError
from settle.db.base import Base
from settle.infrastructure.unique_violation import (
    NeverUniqueViolation, SqliteUniqueViolation,
)
from settle.models.user import User
from settle.services.user_store import UserStore


async def test_create_user_is_unverified(store):
    user = await store.create_user("alice", "a@x.com")
    assert user.status == UserStatus.UNVERIFIED.value
    assert user.token.startswith("user_")
    assert user.mint_token is None
    assert user.secret != user.password


async def test_load_by_username_after_create(store):
    created = await store.create_user("alice", "a@x.com")
    loaded = await store.load_by_username("alice")
    assert loaded is not None
    assert loaded.token == created.token
    assert loaded.status == UserStatus.UNVERIFIED.value
    assert loaded.email == "a@x.com"
    assert loaded.secret == created.secret


async def test_load_by_username_missing_returns_none(store):
    assert await store.load_by_username("nobody") is None


async def test_duplicate_username_is_unique_violation(store):
    await store.create_user("alice", "a@x.com")
    with pytest.raises(UniqueConstraintViolationError) as exc:
        await store.create_user("alice", "b@y.com")
    assert exc.value.cause is not None
    assert exc.value.http_status == 409


async def test_duplicate_email_is_unique_violation(store):
    await store.create_user("alice", "a@x.com")
    with pytest.raises(UniqueConstraintViolationError):
        await store.create_user("bob", "a@x.com")


async def test_store_usable_after_conflict(store):
    await store.create_user("alice", "a@x.com")
    with pytest.raises(UniqueConstraintViolationError):
        await store.create_user("alice", "b@y.com")
    bob = await store.create_user("bob", "b@y.com")
    assert (await store.load_by_username("bob")).token == bob.token


async def test_unclassified_integrity_error_propagates(test_db, issuer):
    store = UserStore(test_db, issuer, NeverUniqueViolation())
    await store.create_user("alice", "a@x.com")
    with pytest.raises(IntegrityError):
        await store.create_user("alice", "b@y.com")


async def test_save_updates_mutable_fields(store, test_db):
    user = await store.create_user("alice", "a@x.com")
    user.status = UserStatus.VERIFIED.value
    user.password = "rolled"
    user.mint_token = "user_mint1"
    await store.save(user)

    loaded = await store.load_by_username("alice")
    assert loaded.status == UserStatus.VERIFIED.value
    assert loaded.password == "rolled"
    assert loaded.mint_token == "user_mint1"


async def test_save_leaves_immutable_fields(store, test_db):
    user = await store.create_user("alice", "a@x.com")
    original_secret = user.secret
    user.secret = "tampered"
    user.email = "evil@x.com"
    user.username = "mallory"
    await store.save(user)

    result = await test_db.execute(select(User).where(User.token == user.token))
    row = result.scalar_one()
    await test_db.refresh(row)
    assert row.secret == original_secret
    assert row.email == "a@x.com"
    assert row.username == "alice"


async def test_save_unknown_user_raises(store):
    ghost = User(
        token="user_ghost", status="verified", username="ghost",
        email="g@x.com", secret="s", password="p",
    )
    with pytest.raises(ResourceNotFoundError):
        await store.save(ghost)


async def test_concurrent_same_username_one_wins(tmp_path, issuer):
    # File-backed: every :memory: connection would be its own database
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

    async def register(email):
        async with factory() as session:
            return await UserStore(
                session, issuer, SqliteUniqueViolation(),
            ).create_user("alice", email)

    try:
        results = await asyncio.gather(
            register("a@x.com"), register("b@y.com"), register("c@z.com"),
            return_exceptions=True,
        )
        winners = [r for r in results if isinstance(r, User)]
        conflicts = [
            r for r in results if isinstance(r, UniqueConstraintViolationError)
        ]
        assert len(winners) == 1
        assert len(conflicts) == 2

        async with factory() as session:
            rows = (await session.execute(
                select(User).where(User.username == "alice")
            )).scalars().all()
        assert [u.token for u in rows] == [winners[0].token]
    finally:
        await engine.dispose()
