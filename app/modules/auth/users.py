from typing import AsyncIterator, Optional, cast

from fastapi import Depends, Request, Response
from fastapi_users import FastAPIUsers, exceptions
from fastapi_users.authentication import (
    AuthenticationBackend,
    CookieTransport,
)
from fastapi_users.authentication.strategy.db import (
    AccessTokenDatabase,
    DatabaseStrategy,
)
from fastapi_users.authentication.transport import Transport
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyAccessTokenDatabase
from fastapi_users.manager import BaseUserManager, IntegerIDMixin
from fastapi_users import schemas as fa_schemas
from httpx_oauth.clients.github import GitHubOAuth2
from httpx_oauth.clients.google import GoogleOAuth2
from httpx_oauth.oauth2 import BaseOAuth2

from pydantic import EmailStr, Field

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas.auth import AccessToken, OAuthAccount, User
from app.core.logging import get_logger

MIN_PASSWORD_LENGTH = 6

logger = get_logger(__name__)


class UserRead(fa_schemas.BaseUser[int]):
    id: int
    email: EmailStr
    name: str


class UserCreate(fa_schemas.BaseUserCreate):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str


class UserUpdate(fa_schemas.BaseUserUpdate):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


async def get_user_db(
    session: AsyncSession = Depends(get_session),
) -> AsyncIterator[SQLAlchemyUserDatabase]:
    yield SQLAlchemyUserDatabase(session, User, OAuthAccount)


async def get_access_token_db(
    session: AsyncSession = Depends(get_session),
) -> AsyncIterator[SQLAlchemyAccessTokenDatabase]:
    yield SQLAlchemyAccessTokenDatabase(session, AccessToken)


class UserManager(IntegerIDMixin, BaseUserManager[User, int]):  # type: ignore[type-arg]
    reset_password_token_secret = settings.app.session_secret
    verification_token_secret = settings.app.session_secret

    async def validate_password(self, password: str, user) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise exceptions.InvalidPasswordException(
                reason=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

    async def on_after_register(self, user: User, request: Optional[Request] = None) -> None:
        logger.info("User %s registered", user.id)

    async def oauth_callback(  # type: ignore[override]
        self,
        oauth_name: str,
        access_token: str,
        account_id: str,
        account_email: str,
        expires_at: Optional[int] = None,
        refresh_token: Optional[str] = None,
        request: Optional[Request] = None,
        *,
        associate_by_email: bool = False,
        is_verified_by_default: bool = False,
    ) -> User:
        try:
            await self.get_by_email(account_email)
            existed = True
        except exceptions.UserNotExists:
            existed = False

        user = await super().oauth_callback(
            oauth_name,
            access_token,
            account_id,
            account_email,
            expires_at,
            refresh_token,
            request,
            associate_by_email=associate_by_email,
            is_verified_by_default=is_verified_by_default,
        )
        if not existed:
            user = await self.user_db.update(
                user,
                {"password_set": False, "name": account_email.split("@", 1)[0] or "User"},
            )
        return user


async def get_user_manager(
    user_db: SQLAlchemyUserDatabase = Depends(get_user_db),
) -> AsyncIterator[UserManager]:
    yield UserManager(user_db)


# Sessions: opaque token in an HTTP-only cookie, backed by the access_tokens table
cookie_transport = CookieTransport(
    cookie_name=settings.session.cookie_name,
    cookie_max_age=settings.session.lifetime_seconds,
    cookie_secure=settings.session_cookie_secure,
    cookie_httponly=True,
    cookie_samesite="lax",
)


def get_database_strategy(
    access_token_db: AccessTokenDatabase[AccessToken] = Depends(get_access_token_db),
) -> DatabaseStrategy:
    return DatabaseStrategy(
        access_token_db, lifetime_seconds=settings.session.lifetime_seconds
    )


auth_backend = AuthenticationBackend(
    name="session",
    transport=cast(Transport, cookie_transport),
    get_strategy=get_database_strategy,
)


fastapi_users = FastAPIUsers[User, int](  # type: ignore[type-arg]
    get_user_manager,
    [auth_backend],
)


def set_session_cookie(response: Response, token: str) -> Response:
    response.set_cookie(
        settings.session.cookie_name,
        token,
        max_age=settings.session.lifetime_seconds,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="lax",
    )
    return response


def clear_session_cookie(response: Response) -> Response:
    response.delete_cookie(
        settings.session.cookie_name,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="lax",
    )
    return response


def build_oauth_clients() -> dict[str, BaseOAuth2]:
    """OAuth clients for the providers that have credentials configured."""
    clients: dict[str, BaseOAuth2] = {}
    oauth = settings.oauth
    if oauth.google_enabled:
        clients["google"] = GoogleOAuth2(
            oauth.google_client_id, oauth.google_client_secret
        )
    else:
        logger.info("Google OAuth credentials not provided - Google login disabled")
    if oauth.github_enabled:
        clients["github"] = GitHubOAuth2(
            oauth.github_client_id, oauth.github_client_secret
        )
    else:
        logger.info("GitHub OAuth credentials not provided - GitHub login disabled")
    return clients


oauth_clients = build_oauth_clients()
