"""User Store — persists, loads and updates User records.

Invariants:
    - create_user issues credentials, then performs a single INSERT; no pre-check
      for existing usernames/emails; the unique constraints decide
    - A unique violation, whatever the backend, surfaces as UniqueConstraintViolationError
      carrying the driver error; every other persistence error propagates
    - save() writes status, password and mint_token only, keyed by token
    - load_by_username() returns None when no row matches

Design Decisions:
    - Backend error shapes handled by an injected UniqueViolationClassifier
      (infrastructure/unique_violation.py); this module never imports a driver
    - Explicit UPDATE in save(): immutable columns cannot be flushed by accident
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from settle.core.domain_types import UserStatus
from settle.core.errors import (
    ErrorContext, ResourceNotFoundError, UniqueConstraintViolationError,
)
from settle.core.repository_protocols import CredentialSource, UniqueViolationClassifier
from settle.infrastructure.tokens import new_token
from settle.models.user import User

logger = logging.getLogger(__name__)


class UserStore:
    """SQLAlchemy-backed UserRepository."""

    def __init__(
        self,
        db: AsyncSession,
        issuer: CredentialSource,
        classifier: UniqueViolationClassifier,
    ):
        self.db = db
        self.issuer = issuer
        self.classifier = classifier

    async def create_user(self, username: str, email: str) -> User:
        """Create and store a new unverified user with fresh credentials."""
        token = new_token("user")
        secret, password = await self.issuer.issue(token)
        user = User(
            token=token,
            created=datetime.now(timezone.utc),
            status=UserStatus.UNVERIFIED.value,
            username=username,
            email=email,
            secret=secret,
            password=password,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            verdict = self.classifier.classify(e)
            if verdict.is_unique_violation:
                logger.info(
                    "Registration conflict",
                    extra={"username": username, "error_code": "unique_constraint_violation"},
                )
                raise UniqueConstraintViolationError(
                    verdict.cause, ErrorContext(username=username),
                ) from e
            raise
        logger.info(
            "User created", extra={"user_token": token, "username": username},
        )
        return user

    async def save(self, user: User) -> None:
        """Persist status, password and mint_token of an existing user."""
        if user in self.db:
            self.db.expunge(user)
        result = await self.db.execute(
            update(User)
            .where(User.token == user.token)
            .values(
                status=user.status,
                password=user.password,
                mint_token=user.mint_token,
            )
        )
        await self.db.commit()
        if result.rowcount == 0:
            raise ResourceNotFoundError("User", user.token)

    async def load_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.username == username),
        )
        return result.scalar_one_or_none()
