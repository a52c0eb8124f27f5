"""User Routes — registration and credential retrieval.

Invariants:
    - POST /api/v1/users returns 201 with a UserResource; 409 when username/email taken
    - POST /api/v1/users/{username}/credentials returns the rolled password;
      404 for unknown users, 401 when the secret does not match
    - Collaborators (issuer, classifier, mailer, email template) live on app.state,
      built once in the lifespan

Design Decisions:
    - get_user_store as a dependency: tests override get_db and reuse the rest
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from settle.config import Settings, get_settings
from settle.infrastructure.database import get_db
from settle.schemas.user import (
    CredentialsRequest, CredentialsResponse, UserCreate, UserResource,
)
from settle.services.registration import register_user, retrieve_credentials
from settle.services.user_store import UserStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_user_store(
    request: Request, db: AsyncSession = Depends(get_db),
) -> UserStore:
    return UserStore(
        db, request.app.state.issuer, request.app.state.unique_classifier,
    )


@router.post(
    "", response_model=UserResource,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    request: Request,
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and mail its credentials link."""
    user = await register_user(
        store,
        request.app.state.mailer,
        request.app.state.email_template,
        settings,
        body.username,
        body.email,
    )
    return UserResource.from_user(user)


@router.post("/{username}/credentials", response_model=CredentialsResponse)
async def get_credentials(
    username: str,
    body: CredentialsRequest,
    request: Request,
    store: UserStore = Depends(get_user_store),
):
    """Exchange the emailed secret for a freshly rolled password."""
    user = await retrieve_credentials(
        store, request.app.state.issuer, username, body.secret,
    )
    return CredentialsResponse(
        username=user.username, status=user.status, password=user.password,
    )
