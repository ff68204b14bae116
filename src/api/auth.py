"""Authentication API endpoints (GitHub OAuth sign-in)."""

import logging
import secrets
from typing import Annotated, Any
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user, safe_return_url
from src.auth.models import GitHubAccount
from src.config import get_settings
from src.constants import HTTPX_TIMEOUT, RETURN_URL_PARAM
from src.db import get_db
from src.models.user import User

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

# GitHub OAuth URLs
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"


# ============== OAuth Helpers ==============


def _callback_url() -> str:
    return f"{settings.app_url}/api/auth/github/callback"


async def _exchange_token_and_get_user(
    token_url: str,
    user_url: str,
    token_data: dict[str, str],
) -> dict[str, Any]:
    """Exchange OAuth code for token and fetch user info."""
    async with httpx.AsyncClient(timeout=HTTPX_TIMEOUT) as client:
        token_response = await client.post(
            token_url,
            data=token_data,
            headers={"Accept": "application/json"},
        )

        if token_response.status_code != 200:
            raise HTTPException(status_code=400, detail="Failed to get access token")

        token_result = token_response.json()
        if "error" in token_result:
            raise HTTPException(
                status_code=400, detail=token_result.get("error_description", "OAuth error")
            )

        access_token = token_result.get("access_token")
        if not access_token:
            raise HTTPException(status_code=400, detail="No access token received")

        user_response = await client.get(
            user_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

        if user_response.status_code != 200:
            raise HTTPException(status_code=400, detail="Failed to get user info")

        return user_response.json()


async def _get_or_create_user(db: AsyncSession, account: GitHubAccount) -> User:
    """Find the user linked to a GitHub account, creating it on first sign-in."""
    result = await db.execute(select(User).where(User.github_id == account.id))
    user = result.scalar_one_or_none()

    if not user:
        user = User(
            github_id=account.id,
            username=account.login,
            email=account.email,
            name=account.name,
            avatar_url=account.avatar_url,
        )
        db.add(user)
        await db.flush()
        logger.info(f"Created user {user.username} from GitHub account {account.id}")
    else:
        user.avatar_url = account.avatar_url
        user.name = account.name or user.name
        if account.email and not user.email:
            user.email = account.email

    return user


# ============== GitHub OAuth ==============


@router.get("/github/login")
async def github_login(
    request: Request,
    return_url: Annotated[str | None, Query(alias=RETURN_URL_PARAM)] = None,
) -> RedirectResponse:
    """Initiate GitHub OAuth login."""
    if not settings.github_client_id:
        raise HTTPException(status_code=501, detail="GitHub sign-in not configured")

    state = secrets.token_urlsafe(32)
    request.session["oauth_state"] = state
    request.session["return_url"] = safe_return_url(return_url)

    params = {
        "client_id": settings.github_client_id,
        "redirect_uri": _callback_url(),
        "scope": "read:user user:email",
        "state": state,
    }
    url = f"{GITHUB_AUTHORIZE_URL}?{urlencode(params)}"
    return RedirectResponse(url=url, status_code=302)


@router.get("/github/callback")
async def github_callback(
    request: Request,
    code: str,
    state: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """Handle GitHub OAuth callback."""
    # Verify state - if invalid, clear session and restart OAuth flow
    stored_state = request.session.get("oauth_state")
    if not stored_state or not secrets.compare_digest(stored_state, state):
        request.session.clear()
        return RedirectResponse(url="/api/auth/github/login", status_code=302)

    del request.session["oauth_state"]
    return_url = safe_return_url(request.session.pop("return_url", None))

    payload = await _exchange_token_and_get_user(
        token_url=GITHUB_TOKEN_URL,
        user_url=GITHUB_USER_URL,
        token_data={
            "client_id": settings.github_client_id,
            "client_secret": settings.github_client_secret,
            "code": code,
            "redirect_uri": _callback_url(),
        },
    )

    try:
        account = GitHubAccount.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Unexpected GitHub user payload: {e}")
        raise HTTPException(status_code=400, detail="Failed to get user info") from e

    user = await _get_or_create_user(db, account)
    await db.commit()

    request.session["user_id"] = user.id
    request.session["username"] = user.username
    return RedirectResponse(url=return_url, status_code=302)


# ============== Common ==============


@router.get("/me")
async def get_me(user: Annotated[User, Depends(get_current_user)]) -> dict:
    """Get current authenticated user."""
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "avatar_url": user.avatar_url,
        "locale": user.locale,
    }
