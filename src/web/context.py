"""Template context helpers."""

from datetime import UTC, datetime
from functools import partial
from typing import Any

from fastapi import Request

from src.auth import get_csrf_token
from src.config import get_settings
from src.constants import DEFAULT_LOCALE
from src.i18n import t
from src.models.user import User

NAV_PAGES = {
    "/": "home",
    "/index": "home",
    "/about": "about",
    "/contact": "contact",
    "/privacy": "privacy",
    "/githubprofile": "github_profile",
}


def get_base_context(request: Request, user: User | None = None) -> dict[str, Any]:
    """Get base context for all templates."""
    locale = user.locale if user else request.session.get("locale", DEFAULT_LOCALE)

    # Determine current page from URL path for navbar highlighting
    path = request.url.path.rstrip("/").lower() or "/"
    current_page = NAV_PAGES.get(path)

    return {
        "request": request,
        "user": user,
        "locale": locale,
        "t": partial(t, locale=locale),  # Translation function bound to current locale
        "current_page": current_page,
        "csrf_token": get_csrf_token(request),
        "app_name": get_settings().app_name,
        "current_year": datetime.now(UTC).year,
    }
