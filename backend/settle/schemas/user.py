"""User Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserCreate.username: 1-64 chars, starts alphanumeric, then [A-Za-z0-9_.-]
    - UserCreate.email: single @, dotted domain, at most 256 chars
    - UserResource never exposes secret or password
    - UserResource.created is milliseconds since the epoch

Design Decisions:
    - field_validator for side-effect-free transforms (strip, lowercase), models stay pure
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from settle.models.user import User


class UserCreate(BaseModel):
    """Registration request."""
    username: str = Field(
        min_length=1, max_length=64, pattern=r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$",
    )
    email: str = Field(
        min_length=3, max_length=256, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class UserResource(BaseModel):
    """Public-facing user data."""
    id: str
    created: int
    status: str
    username: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserResource":
        created = user.created
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return cls(
            id=user.token,
            created=int(created.timestamp() * 1000),
            status=user.status,
            username=user.username,
            email=user.email,
        )


class CredentialsRequest(BaseModel):
    """Secret taken from the credentials link fragment."""
    secret: str = Field(min_length=1, max_length=256)


class CredentialsResponse(BaseModel):
    username: str
    status: str
    password: str
