"""Web routes for Jinja2 templates."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user, get_optional_user, safe_return_url, verify_csrf_token
from src.config import BASE_DIR
from src.constants import RETURN_URL_PARAM, SUPPORTED_LOCALES
from src.db import get_db
from src.models.user import User
from src.services.github import GithubClient, get_github_client
from src.web.context import get_base_context
from src.web.profile import LookupStatus, ProfilePageState, lookup_profile, parse_lookup_form

logger = logging.getLogger(__name__)

web_router = APIRouter()
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

OptionalUser = Annotated[User | None, Depends(get_optional_user)]


def _render(
    request: Request,
    template: str,
    user: User | None = None,
    status_code: int = 200,
    **extra,
) -> HTMLResponse:
    context = get_base_context(request, user)
    context.update(extra)
    return templates.TemplateResponse(request, template, context, status_code=status_code)


# ============== Pages ==============


@web_router.get("/", response_class=HTMLResponse)
@web_router.get("/Index", response_class=HTMLResponse)
async def home_page(request: Request, user: OptionalUser) -> HTMLResponse:
    """Render home page."""
    return _render(request, "pages/index.html", user)


@web_router.get("/About", response_class=HTMLResponse)
async def about_page(request: Request, user: OptionalUser) -> HTMLResponse:
    """Render about page."""
    return _render(request, "pages/about.html", user)


@web_router.get("/Contact", response_class=HTMLResponse)
async def contact_page(request: Request, user: OptionalUser) -> HTMLResponse:
    """Render contact page."""
    return _render(request, "pages/contact.html", user)


@web_router.get("/Privacy", response_class=HTMLResponse)
async def privacy_page(request: Request, user: OptionalUser) -> HTMLResponse:
    """Render privacy policy page."""
    return _render(request, "pages/privacy.html", user)


@web_router.get("/Error", response_class=HTMLResponse)
async def error_page(request: Request) -> HTMLResponse:
    """Render generic error page."""
    return _render(request, "pages/error.html")


# ============== GitHub profile ==============


def _render_profile(request: Request, user: User | None, state: ProfilePageState) -> HTMLResponse:
    status_code = status.HTTP_502_BAD_GATEWAY if state.status is LookupStatus.FAILED else 200
    return _render(request, "pages/github_profile.html", user, status_code=status_code, state=state)


@web_router.get("/GithubProfile", response_class=HTMLResponse)
async def github_profile_page(request: Request, user: OptionalUser) -> HTMLResponse:
    """Render the empty lookup form."""
    return _render_profile(request, user, ProfilePageState())


@web_router.post(
    "/GithubProfile",
    response_class=HTMLResponse,
    dependencies=[Depends(verify_csrf_token)],
)
async def github_profile_submit(
    request: Request,
    user: OptionalUser,
    client: Annotated[GithubClient, Depends(get_github_client)],
    user_name: Annotated[str | None, Form(alias="Input_UserName")] = None,
) -> HTMLResponse:
    """Look up the submitted username and re-render the page with the result."""
    form, state = parse_lookup_form(user_name)
    if form is not None:
        state = await lookup_profile(form.user_name, client)
    return _render_profile(request, user, state)


# ============== Identity ==============


@web_router.get("/Identity/Account/Login", response_class=HTMLResponse, response_model=None)
async def login_page(
    request: Request,
    user: OptionalUser,
    return_url: Annotated[str | None, Query(alias=RETURN_URL_PARAM)] = None,
) -> HTMLResponse | RedirectResponse:
    """Render login page."""
    target = safe_return_url(return_url)
    if user:
        return RedirectResponse(url=target, status_code=302)

    # Clear any stale OAuth state from previous attempts
    request.session.pop("oauth_state", None)

    return _render(request, "identity/login.html", return_url=target)


@web_router.get("/Identity/Account/Manage", response_class=HTMLResponse)
async def manage_account_page(
    request: Request,
    user: Annotated[User, Depends(get_current_user)],
) -> HTMLResponse:
    """Render account management page."""
    return _render(request, "identity/manage.html", user, locales=SUPPORTED_LOCALES)


@web_router.post(
    "/Identity/Account/Manage",
    response_class=HTMLResponse,
    dependencies=[Depends(get_current_user), Depends(verify_csrf_token)],
)
async def manage_account_submit(
    request: Request,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    locale: Annotated[str, Form()],
) -> HTMLResponse:
    """Update account preferences."""
    if locale not in SUPPORTED_LOCALES:
        return _render(
            request,
            "identity/manage.html",
            user,
            status_code=400,
            locales=SUPPORTED_LOCALES,
            error="manage.errors.locale",
        )

    user.locale = locale
    await db.commit()
    request.session["locale"] = locale
    logger.info(f"User {user.username} switched locale to {locale}")

    return _render(
        request,
        "identity/manage.html",
        user,
        locales=SUPPORTED_LOCALES,
        saved=True,
    )


@web_router.post("/Identity/Account/Logout", dependencies=[Depends(verify_csrf_token)])
async def logout(request: Request) -> RedirectResponse:
    """Log out the current user."""
    request.session.clear()
    return RedirectResponse(url="/", status_code=302)
