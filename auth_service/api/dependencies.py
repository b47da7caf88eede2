"""FastAPI dependencies for authentication and database."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from auth_service.database import get_db
from auth_service.exceptions import InvalidToken, NotFound, TokenExpired, Unauthenticated
from auth_service.models.user import User
from auth_service.repositories.base import UserStore
from auth_service.repositories.sql import SqlUserStore
from auth_service.services.auth import AuthService
from auth_service.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    """Get the durable user store for this request.

    ``create_app`` overrides this dependency when an in-memory store is injected.
    """
    return SqlUserStore(db)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_auth_service(
    request: Request,
    store: Annotated[UserStore, Depends(get_user_store)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(store, request.app.state.password_hasher, request.app.state.token_issuer)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> User:
    """Get the current authenticated user from the bearer token.

    A token for a user that no longer exists is rejected like any other bad token.
    """
    if credentials is None:
        raise Unauthenticated()

    try:
        user_id = tokens.verify(credentials.credentials)
    except (InvalidToken, TokenExpired) as e:
        logger.debug(f"Rejected bearer token: {e.detail}")
        raise Unauthenticated() from None

    try:
        return store.find_by_id(user_id)
    except NotFound:
        logger.info(f"Token subject {user_id} does not resolve to an active user")
        raise Unauthenticated() from None
