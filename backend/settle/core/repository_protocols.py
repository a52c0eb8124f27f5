"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - UniqueViolationClassifier returns a uniform Classification so the store never
      inspects driver-specific exception shapes itself
"""

from dataclasses import dataclass
from typing import Protocol, TYPE_CHECKING

from settle.core.domain_types import AssetDescriptor

if TYPE_CHECKING:
    from settle.models.user import User


class AssetResolver(Protocol):
    """Splits an asset pair into its two asset descriptors. Raises on failure."""
    def __call__(self, pair: str) -> list[AssetDescriptor]: ...


@dataclass(frozen=True)
class Classification:
    """Portable verdict on a persistence error."""
    is_unique_violation: bool
    cause: BaseException


class UniqueViolationClassifier(Protocol):
    """One adapter per database backend."""
    def classify(self, error: BaseException) -> Classification: ...


class CredentialSource(Protocol):
    """Issues base64url-encoded (secret, password) material for a user token."""
    async def issue(self, user_token: str) -> tuple[str, str]: ...
    async def derive_password(self, user_token: str) -> str: ...


class UserRepository(Protocol):
    """Contract for user persistence, implemented by shell."""
    async def create_user(self, username: str, email: str) -> "User": ...
    async def save(self, user: "User") -> None: ...
    async def load_by_username(self, username: str) -> "User | None": ...


class Mailer(Protocol):
    """Delivers a fully rendered RFC 822 message."""
    async def send(self, sender: str, recipient: str, message: str) -> None: ...
