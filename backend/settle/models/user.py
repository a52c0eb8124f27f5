"""User ORM — the registered account and its credentials.

Invariants:
    - token is the primary key; username and email are unique (database-enforced)
    - created, username, email and secret never change after insert
    - status transitions: unverified -> verified (never back)
    - mint_token is NULL until the user claims a mint identity

Design Decisions:
    - Uniqueness lives in the table constraints only; the store never pre-checks
    - String status column over a DB enum: portable across PostgreSQL and SQLite
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from settle.core.domain_types import UserStatus
from settle.db.base import Base


class User(Base):
    """Registered user."""
    __tablename__ = "users"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserStatus.UNVERIFIED.value,
    )
    username: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    secret: Mapped[str] = mapped_column(String(128), nullable=False)
    password: Mapped[str] = mapped_column(String(64), nullable=False)
    mint_token: Mapped[str | None] = mapped_column(String(64), nullable=True)

    @property
    def is_verified(self) -> bool:
        return self.status == UserStatus.VERIFIED.value

    def mark_verified(self) -> None:
        self.status = UserStatus.VERIFIED.value
