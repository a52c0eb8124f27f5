"""Credential Issuer — derives a user's secret and password with scrypt.

Invariants:
    - Cost parameters are fixed: N=16384, r=8, p=1 (compatibility with stored credentials)
    - Secret is 64 derived bytes, password 16; both base64url-encoded without padding
    - Secret and password come from two independent derivations, each with its own
      fresh random passphrase; the user token is the salt for both
    - At most `max_concurrency` derivations run at once; extra callers wait their turn
    - Any derivation failure raises CredentialDerivationError (nothing partial returned)

Design Decisions:
    - hashlib.scrypt (OpenSSL) over a third-party KDF: same primitive, no extra dependency
    - asyncio.to_thread runs each derivation (tens of ms) off the event loop;
      the semaphore is the admission bound that keeps registrations from exhausting CPU
"""

import asyncio
import base64
import hashlib
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from settle.core.errors import CredentialDerivationError, ErrorContext
from settle.infrastructure.tokens import rand_str

if TYPE_CHECKING:
    from settle.models.user import User

logger = logging.getLogger(__name__)

SCRYPT_N: int = 16384
SCRYPT_R: int = 8
SCRYPT_P: int = 1
SECRET_BYTE_LEN: int = 64
PASSWORD_BYTE_LEN: int = 16

# 128 * r * N bytes of working memory, plus headroom for OpenSSL
_SCRYPT_MAXMEM: int = 2 * 128 * SCRYPT_R * SCRYPT_N


def encode(raw: bytes) -> str:
    """base64url without padding."""
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def derive(passphrase: str, user_token: str, length: int) -> str:
    """One scrypt derivation, base64url-encoded. Raises CredentialDerivationError."""
    try:
        key = hashlib.scrypt(
            passphrase.encode("utf-8"),
            salt=user_token.encode("utf-8"),
            n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P,
            maxmem=_SCRYPT_MAXMEM, dklen=length,
        )
    except (ValueError, MemoryError) as e:
        raise CredentialDerivationError(
            e, ErrorContext(user_token=user_token),
        ) from e
    return encode(key)


class CredentialIssuer:
    """Bounded, async front for the secret/password derivations."""

    def __init__(
        self,
        max_concurrency: int = 4,
        passphrase_source: Callable[[], str] = rand_str,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_concurrency = max_concurrency
        self._slots = asyncio.Semaphore(max_concurrency)
        self._passphrase_source = passphrase_source

    async def _derive(self, user_token: str, length: int) -> str:
        async with self._slots:
            return await asyncio.to_thread(
                derive, self._passphrase_source(), user_token, length,
            )

    async def issue(self, user_token: str) -> tuple[str, str]:
        """Return (secret, password) for a new user."""
        secret = await self._derive(user_token, SECRET_BYTE_LEN)
        password = await self._derive(user_token, PASSWORD_BYTE_LEN)
        logger.info("Credentials issued", extra={"user_token": user_token})
        return secret, password

    async def derive_password(self, user_token: str) -> str:
        return await self._derive(user_token, PASSWORD_BYTE_LEN)

    async def roll_password(self, user: "User") -> str:
        """Replace user.password with a fresh derivation; secret is untouched."""
        user.password = await self.derive_password(user.token)
        logger.info("Password rolled", extra={"user_token": user.token})
        return user.password
