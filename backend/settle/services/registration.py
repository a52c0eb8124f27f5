"""Registration — creates users, delivers credential links, hands out passwords.

Invariants:
    - register_user sends exactly one credentials email per created user, and only
      after the INSERT committed
    - retrieve_credentials compares secrets in constant time
    - Status only ever moves unverified -> verified
    - link_mint_user requires a verified user

Design Decisions:
    - Plain async functions over a service class: every collaborator is passed in,
      routes stay thin and tests swap fakes in directly
"""

import hmac
import logging

from settle.config import Settings
from settle.core.errors import (
    CredentialsMismatchError, ErrorContext, ResourceNotFoundError,
)
from settle.core.render_email import CredentialsEmailTemplate, EmailData
from settle.core.repository_protocols import Mailer, UserRepository
from settle.infrastructure.credential_issuer import CredentialIssuer
from settle.models.user import User

logger = logging.getLogger(__name__)


async def register_user(
    store: UserRepository,
    mailer: Mailer,
    template: CredentialsEmailTemplate,
    settings: Settings,
    username: str,
    email: str,
) -> User:
    """Create the user and mail the link to retrieve its credentials."""
    user = await store.create_user(username, email)
    message = template.render(EmailData(
        env=settings.environment.value,
        from_address=settings.mail_from,
        username=user.username,
        email=user.email,
        mint=settings.mint_host,
        credentials_url=settings.credentials_url,
        secret=user.secret,
    ))
    await mailer.send(settings.mail_from, user.email, message)
    return user


async def retrieve_credentials(
    store: UserRepository,
    issuer: CredentialIssuer,
    username: str,
    secret: str,
) -> User:
    """Verify the secret, mark the user verified and roll its password."""
    user = await store.load_by_username(username)
    if user is None:
        raise ResourceNotFoundError("User", username)
    if not hmac.compare_digest(user.secret.encode("utf-8"), secret.encode("utf-8")):
        logger.warning(
            "Credentials mismatch",
            extra={"user_token": user.token, "error_code": "credentials_mismatch"},
        )
        raise CredentialsMismatchError(ErrorContext(username=username))

    if not user.is_verified:
        user.mark_verified()
        logger.info("User verified", extra={"user_token": user.token})
    await issuer.roll_password(user)
    await store.save(user)
    return user


async def link_mint_user(
    store: UserRepository, user: User, mint_token: str,
) -> User:
    """Associate a verified user with the mint identity it claimed."""
    if not user.is_verified:
        raise CredentialsMismatchError(ErrorContext(
            user_token=user.token, debug_info={"reason": "unverified"},
        ))
    user.mint_token = mint_token
    await store.save(user)
    return user
