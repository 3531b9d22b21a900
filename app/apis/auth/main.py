from __future__ import annotations

from typing import Optional

import httpx
import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi_users import exceptions
from fastapi_users.jwt import decode_jwt, generate_jwt
from httpx_oauth.exceptions import HTTPXOAuthError
from httpx_oauth.oauth2 import BaseOAuth2

from app.core.config import settings
from app.core.db.schemas.auth import User
from app.core.logging import get_logger
from app.modules.auth import (
    UserCreate,
    UserManager,
    clear_session_cookie,
    fastapi_users,
    get_database_strategy,
    get_user_manager,
    oauth_clients,
    record_activity,
    set_session_cookie,
)
from .schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)


router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = get_logger(__name__)

OAUTH_STATE_AUDIENCE = "learnova:oauth-state"
OAUTH_STATE_LIFETIME_SECONDS = 600
OAUTH_SCOPES = {
    "google": ["profile", "email"],
    "github": ["user:email"],
}


def user_summary(user: User) -> UserSummary:
    return UserSummary(
        id=user.id,
        name=user.name,
        email=str(user.email),
        role=user.role.value,
        consecutive_days=user.consecutive_days or 0,
    )


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
) -> RegisterResponse:
    """Create a local account; the user still has to log in afterwards."""
    try:
        user = await user_manager.create(
            UserCreate(
                name=body.name.strip(),
                email=body.email.lower(),
                password=body.password,
            ),
            safe=True,
            request=request,
        )
    except exceptions.UserAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )
    except exceptions.InvalidPasswordException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Validation failed",
                "details": [{"loc": ["body", "password"], "msg": e.reason}],
            },
        )

    return RegisterResponse(
        message="Registration successful! Please log in to continue.",
        user=user_summary(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    user_manager: UserManager = Depends(get_user_manager),
    strategy=Depends(get_database_strategy),
) -> LoginResponse:
    """Check email/password, open a server-side session and set its cookie."""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password"
    )
    try:
        user = await user_manager.get_by_email(body.email)
    except exceptions.UserNotExists:
        # hash anyway so a missing account costs the same as a wrong password
        user_manager.password_helper.hash(body.password)
        raise invalid

    if not user.password_set:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please use OAuth login for this account",
        )

    verified, updated_hash = user_manager.password_helper.verify_and_update(
        body.password, user.hashed_password
    )
    if not verified or not user.is_active:
        raise invalid
    if updated_hash is not None:
        user = await user_manager.user_db.update(user, {"hashed_password": updated_hash})

    user = await record_activity(user_manager, user)
    token = await strategy.write_token(user)
    set_session_cookie(response, token)
    await user_manager.on_after_login(user, request, response)
    return LoginResponse(user=user_summary(user))


@router.get("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    user_token: tuple[Optional[User], Optional[str]] = Depends(
        fastapi_users.authenticator.current_user_token(optional=True, active=True)
    ),
    strategy=Depends(get_database_strategy),
) -> MessageResponse:
    user, token = user_token
    if user is not None and token is not None:
        await strategy.destroy_token(token, user)
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


# -- OAuth ------------------------------------------------------------------


def _oauth_client(provider: str) -> BaseOAuth2:
    client = oauth_clients.get(provider)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{provider} login is not enabled",
        )
    return client


def _not_localhost(url: Optional[str]) -> bool:
    return bool(url) and "localhost" not in url.lower()


def oauth_callback_url(request: Request, provider: str) -> str:
    """Public callback URL, preferring explicit non-localhost configuration.

    Behind a proxy the request host is internal, so the forwarded headers are
    used to rebuild the public origin.
    """
    configured = {
        "google": settings.oauth.google_callback_url,
        "github": settings.oauth.github_callback_url,
    }.get(provider)
    if _not_localhost(configured):
        return configured  # type: ignore[return-value]

    env_backend = (settings.app.backend_url or "").strip()
    host = request.headers.get("x-forwarded-host") or request.headers.get("host", "")
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    base = env_backend if _not_localhost(env_backend) else f"{proto}://{host}"
    return f"{base.rstrip('/')}/api/auth/oauth/{provider}/callback"


def _frontend(path: str) -> str:
    return f"{settings.app.frontend_url.rstrip('/')}{path}"


@router.get("/oauh/google/callback", include_in_schema=False)
async def misspelled_google_callback(request: Request) -> RedirectResponse:
    """Some Google console entries carry an "oauh" typo; forward to the real path."""
    qs = f"?{request.url.query}" if request.url.query else ""
    return RedirectResponse(f"/api/auth/oauth/google/callback{qs}", status_code=302)


@router.get("/oauth/{provider}")
async def oauth_authorize(provider: str, request: Request) -> RedirectResponse:
    client = _oauth_client(provider)
    callback = oauth_callback_url(request, provider)
    logger.info("[OAuth] %s auth initiation, using callback: %s", provider, callback)
    state = generate_jwt(
        {"aud": OAUTH_STATE_AUDIENCE, "provider": provider},
        settings.app.session_secret,
        OAUTH_STATE_LIFETIME_SECONDS,
    )
    url = await client.get_authorization_url(
        callback, state, OAUTH_SCOPES.get(provider)
    )
    return RedirectResponse(url, status_code=302)


@router.get("/oauth/{provider}/callback")
async def oauth_callback(
    provider: str,
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    user_manager: UserManager = Depends(get_user_manager),
    strategy=Depends(get_database_strategy),
) -> RedirectResponse:
    failed = RedirectResponse(_frontend("/login?error=oauth_failed"), status_code=302)
    client = _oauth_client(provider)
    if error or not code or not state:
        logger.warning("[OAuth] %s callback without code/state: %s", provider, error)
        return failed

    try:
        claims = decode_jwt(state, settings.app.session_secret, [OAUTH_STATE_AUDIENCE])
    except jwt.PyJWTError:
        logger.warning("[OAuth] %s callback with invalid state", provider)
        return failed
    if claims.get("provider") != provider:
        return failed

    callback = oauth_callback_url(request, provider)
    try:
        token = await client.get_access_token(code, callback)
        account_id, account_email = await client.get_id_email(token["access_token"])
    except (HTTPXOAuthError, httpx.HTTPError) as e:
        logger.warning("[OAuth] %s token exchange failed: %s", provider, e)
        return failed
    if not account_email:
        logger.warning("[OAuth] %s account %s has no email", provider, account_id)
        return failed

    try:
        user = await user_manager.oauth_callback(
            provider,
            token["access_token"],
            account_id,
            account_email,
            token.get("expires_at"),
            token.get("refresh_token"),
            request,
            associate_by_email=True,
            is_verified_by_default=True,
        )
    except exceptions.UserAlreadyExists:
        return failed
    if not user.is_active:
        return failed

    user = await record_activity(user_manager, user)
    session_token = await strategy.write_token(user)
    response = RedirectResponse(_frontend("/dashboard"), status_code=302)
    set_session_cookie(response, session_token)
    await user_manager.on_after_login(user, request, response)
    return response
