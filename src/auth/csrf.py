"""Anti-forgery tokens for server-rendered forms.

The token lives in the signed session cookie and is echoed back by every
form as a hidden ``__RequestVerificationToken`` field.
"""

import hmac
import secrets

from fastapi import HTTPException, Request, status

from src.constants import CSRF_FORM_FIELD, CSRF_SESSION_KEY


def get_csrf_token(request: Request) -> str:
    """Return the session's anti-forgery token, creating it on first use."""
    token = request.session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[CSRF_SESSION_KEY] = token
    return token


async def verify_csrf_token(request: Request) -> None:
    """Reject form posts whose token does not match the session."""
    form = await request.form()
    submitted = form.get(CSRF_FORM_FIELD)
    expected = request.session.get(CSRF_SESSION_KEY)

    if (
        not expected
        or not isinstance(submitted, str)
        or not hmac.compare_digest(submitted, expected)
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid anti-forgery token",
        )
