"""Authentication dependencies for FastAPI."""

from typing import Annotated
from urllib.parse import urlencode

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.constants import LOGIN_PATH, RETURN_URL_PARAM
from src.db import get_db
from src.models.user import User


async def get_optional_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Get current user from session if logged in."""
    user_id = request.session.get("user_id")
    if not user_id:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    # If user_id in session but user doesn't exist in DB, clear stale session
    if not user:
        request.session.clear()

    return user


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Get current user, raising 401 if not authenticated."""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def safe_return_url(url: str | None) -> str:
    """Keep only local redirect targets ("/path"), falling back to home."""
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return "/"
    return url


def login_url_for(request: Request) -> str:
    """Login page URL that returns to the requested path after sign-in."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return f"{LOGIN_PATH}?{urlencode({RETURN_URL_PARAM: target})}"
