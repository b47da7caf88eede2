"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth_service.api import auth
from auth_service.api.dependencies import get_user_store
from auth_service.config import Settings, get_settings
from auth_service.database import create_db_engine, create_session_factory, init_db
from auth_service.exceptions import AuthError
from auth_service.repositories.base import UserStore
from auth_service.services.passwords import PasswordHasher
from auth_service.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render taxonomy errors the same way FastAPI renders HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 Bad Request."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(settings: Settings | None = None, user_store: UserStore | None = None) -> FastAPI:
    """
    Build the API with explicitly constructed collaborators.

    Args:
        settings: configuration; defaults to the environment-loaded settings.
        user_store: when given, every request uses this store instead of the
            SQL store and no database engine is created.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        engine = getattr(app.state, "engine", None)
        if engine is not None and settings.auto_create_tables:
            init_db(engine)
        yield
        if engine is not None:
            engine.dispose()

    app = FastAPI(
        title="Auth Service API",
        description="User registration, login and profile management with bearer tokens",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer(settings.jwt_secret, settings.jwt_algorithm)

    if user_store is None:
        app.state.engine = create_db_engine(settings)
        app.state.session_factory = create_session_factory(app.state.engine)
    else:
        app.dependency_overrides[get_user_store] = lambda: user_store

    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:3000", "http://localhost:5173"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Register routers
    app.include_router(auth.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    logger.debug(f"Created app for environment {settings.environment}")
    return app
