"""FastAPI dependency injection for the storefront API.

Provides dependencies for:
- Database sessions
- Auth primitives (tokens, password hashing, cookie signing)
- Application services
- Authentication strategies (register, login, GitHub) that hand the
  handlers an already authenticated user
- The per-request session context (cookie session + request logger)
"""

import logging
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront.application.context import SessionContext
from storefront.application.services import (
    PasswordResetService,
    SessionService,
    UserService,
)
from storefront.domain.user import PublicUser, User
from storefront.infrastructure.email import MailingService
from storefront.infrastructure.oauth import GitHubOAuthClient, GitHubOAuthError
from storefront.infrastructure.persistence.sqlalchemy import UserRepositorySQLAlchemy
from storefront.presentation.api.config import get_api_settings
from storefront.presentation.api.schemas import LoginRequest, RegisterRequest
from storefront_auth import (
    CookieSigner,
    InvalidTokenError,
    NotAuthenticatedError,
    PasswordHashingService,
    TokenService,
)
from storefront_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SESSION_COOKIE = "token"

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    Returns
    -------
    AsyncEngine instance
    """
    url = get_settings().database_url

    # Ensure data directory exists for SQLite
    if url.startswith("sqlite") and ":memory:" not in url:
        db_path = url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(url, echo=False, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Auth primitives
# -----------------------------------------------------------------------------


@lru_cache(maxsize=4)
def _password_service(rounds: int) -> PasswordHashingService:
    return PasswordHashingService(rounds=rounds)


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    return _password_service(settings.password_hash_rounds)


def get_token_service(settings: SettingsDep) -> TokenService:
    return TokenService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        expire_hours=settings.jwt_token_expire_hours,
        algorithm=settings.jwt_algorithm,
    )


def get_cookie_signer(settings: SettingsDep) -> CookieSigner:
    return CookieSigner(settings.cookie_secret.get_secret_value())


def get_mailing_service(settings: SettingsDep) -> MailingService:
    return MailingService(settings)


def get_github_client(settings: SettingsDep) -> GitHubOAuthClient:
    if not settings.github_enabled:
        msg = "GitHub login is not configured"
        raise GitHubOAuthError(msg)
    return GitHubOAuthClient(
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret.get_secret_value(),
        callback_url=settings.github_callback_url,
    )


PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
CookieSignerDep = Annotated[CookieSigner, Depends(get_cookie_signer)]
MailingServiceDep = Annotated[MailingService, Depends(get_mailing_service)]
GitHubClientDep = Annotated[GitHubOAuthClient, Depends(get_github_client)]


# -----------------------------------------------------------------------------
# Application services
# -----------------------------------------------------------------------------


def get_user_service(
    session: DBSession,
    password_service: PasswordServiceDep,
) -> UserService:
    return UserService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
    )


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_session_service(
    user_service: UserServiceDep,
    token_service: TokenServiceDep,
) -> SessionService:
    return SessionService(user_service=user_service, token_service=token_service)


def get_password_reset_service(  # NOQA: PLR0913
    user_service: UserServiceDep,
    token_service: TokenServiceDep,
    mailing_service: MailingServiceDep,
    password_service: PasswordServiceDep,
    settings: SettingsDep,
) -> PasswordResetService:
    return PasswordResetService(
        user_service=user_service,
        token_service=token_service,
        mailing_service=mailing_service,
        password_service=password_service,
        reset_password_url=settings.reset_password_url,
        token_expiry=timedelta(minutes=settings.reset_token_expire_minutes),
    )


SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]
PasswordResetServiceDep = Annotated[
    PasswordResetService,
    Depends(get_password_reset_service),
]


# -----------------------------------------------------------------------------
# Session resolution
# -----------------------------------------------------------------------------


def _session_user(
    request: Request,
    session_service: SessionService,
    signer: CookieSigner,
) -> PublicUser | None:
    signed = request.cookies.get(SESSION_COOKIE)
    if not signed:
        return None
    try:
        token = signer.unsign(signed)
    except InvalidTokenError:
        logger.debug("Rejected session cookie with a bad signature")
        return None
    return session_service.resolve_token(token)


def get_session_context(
    request: Request,
    session_service: SessionServiceDep,
    signer: CookieSignerDep,
) -> SessionContext:
    """Build the request context, resolving the cookie session if present."""
    return SessionContext.for_request(
        method=request.method,
        path=request.url.path,
        user=_session_user(request, session_service, signer),
    )


SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]


def require_session(ctx: SessionContextDep) -> SessionContext:
    if ctx.user is None:
        raise NotAuthenticatedError
    return ctx


AuthenticatedContext = Annotated[SessionContext, Depends(require_session)]


# -----------------------------------------------------------------------------
# Authentication strategies
# -----------------------------------------------------------------------------


async def register_strategy(
    body: RegisterRequest,
    user_service: UserServiceDep,
) -> User:
    """Create the account described by the request body."""
    return await user_service.create_user(
        email=body.email or "",
        password=body.password or "",
        first_name=body.first_name,
        last_name=body.last_name,
        age=body.age,
    )


async def login_strategy(body: LoginRequest, user_service: UserServiceDep) -> User:
    """Check email and password, returning the matching user."""
    return await user_service.authenticate(body.email or "", body.password or "")


async def github_strategy(
    user_service: UserServiceDep,
    github_client: GitHubClientDep,
    code: Annotated[str, Query()] = "",
) -> User:
    """Exchange the GitHub callback code for a (possibly new) user."""
    profile = await github_client.fetch_profile(code)
    return await user_service.get_or_create_oauth_user(profile)


RegisteredUser = Annotated[User, Depends(register_strategy)]
LoggedInUser = Annotated[User, Depends(login_strategy)]
GitHubUser = Annotated[User, Depends(github_strategy)]
