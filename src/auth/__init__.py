"""Authentication module."""

from src.auth.csrf import get_csrf_token, verify_csrf_token
from src.auth.dependencies import (
    get_current_user,
    get_optional_user,
    login_url_for,
    safe_return_url,
)

__all__ = [
    "get_csrf_token",
    "get_current_user",
    "get_optional_user",
    "login_url_for",
    "safe_return_url",
    "verify_csrf_token",
]
