"""GitHub user lookup clients.

The profile page depends only on the ``GithubClient`` protocol. Two
implementations are provided:

- ``HttpGithubClient`` talks to the GitHub REST API over httpx.
- ``InMemoryGithubClient`` answers from a fixed mapping, for tests and
  offline development.

Documentation: https://docs.github.com/en/rest/users/users#get-a-user
"""

import logging
import re
from collections.abc import Mapping
from typing import Protocol, runtime_checkable
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from src.config import get_settings
from src.constants import (
    GITHUB_API_VERSION,
    GITHUB_RETRY_BASE_DELAY,
    GITHUB_RETRY_MAX_DELAY,
    GITHUB_USER_AGENT,
    USERNAME_MAX_LENGTH,
    USERNAME_PATTERN,
)
from src.services.github.models import GithubUser
from src.utils.http_client import get_github_http_client
from src.utils.retry import RetryConfig, retry_async

logger = logging.getLogger(__name__)

_LOGIN_RE = re.compile(USERNAME_PATTERN)


def is_valid_login(username: str) -> bool:
    """Check a name against GitHub's login rules."""
    return len(username) <= USERNAME_MAX_LENGTH and _LOGIN_RE.fullmatch(username) is not None


class GithubClientError(Exception):
    """Base exception for GitHub lookup errors."""

    pass


class GithubUnavailableError(GithubClientError):
    """GitHub could not be reached or answered with an unusable response."""

    pass


@runtime_checkable
class GithubClient(Protocol):
    """Capability to look up a GitHub user by username."""

    async def get_user(self, username: str) -> GithubUser | None:
        """Return the user's profile, or None when no such user exists.

        Raises:
            GithubClientError: When the lookup itself failed
        """
        ...


class HttpGithubClient:
    """Client for the GitHub REST API.

    Usage:
        client = HttpGithubClient(token="ghp_...")
        user = await client.get_user("octocat")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        retry_config: RetryConfig | None = None,
    ):
        """Initialize GitHub client.

        Args:
            http_client: Shared httpx client used for requests
            base_url: REST API root (GitHub Enterprise installs differ)
            token: Optional personal access token for higher rate limits
            retry_config: Backoff policy for transient failures
        """
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.token = token or None
        self.retry_config = retry_config or RetryConfig(
            max_retries=2,
            base_delay=GITHUB_RETRY_BASE_DELAY,
            max_delay=GITHUB_RETRY_MAX_DELAY,
        )

    def _get_headers(self) -> dict[str, str]:
        """Get request headers."""
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": GITHUB_USER_AGENT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _user_url(self, username: str) -> str:
        # Callers pass validated logins only; quoting keeps the name one path segment
        return f"{self.base_url}/users/{quote(username, safe='')}"

    async def get_user(self, username: str) -> GithubUser | None:
        """Fetch a user's public profile.

        Returns:
            The profile, or None if GitHub reports no such user or the
            name cannot be a GitHub login (no request is made then)

        Raises:
            GithubUnavailableError: On transport errors, exhausted retries,
                unexpected status codes or malformed payloads
        """
        if not is_valid_login(username):
            logger.debug(f"Skipping lookup of invalid GitHub login: {username!r}")
            return None

        try:
            response = await retry_async(
                self.http_client.get,
                self._user_url(username),
                headers=self._get_headers(),
                config=self.retry_config,
                operation_name=f"GitHub user lookup ({username})",
            )
        except httpx.HTTPError as e:
            raise GithubUnavailableError(f"Cannot reach GitHub: {e}") from e

        if response is None:
            raise GithubUnavailableError("GitHub API did not respond successfully")

        if response.status_code == 404:
            return None

        if response.status_code != 200:
            raise GithubUnavailableError(f"GitHub API error {response.status_code}")

        try:
            return GithubUser.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise GithubUnavailableError(f"Malformed GitHub user payload: {e}") from e


DEFAULT_FAKE_USERS: dict[str, GithubUser] = {
    "user": GithubUser(login="user", name="John Doe", company="Contoso Blockchain"),
}


class InMemoryGithubClient:
    """Deterministic client answering from a fixed username -> profile mapping."""

    def __init__(self, users: Mapping[str, GithubUser] | None = None):
        self.users = dict(DEFAULT_FAKE_USERS if users is None else users)

    async def get_user(self, username: str) -> GithubUser | None:
        return self.users.get(username)


def create_github_client() -> GithubClient:
    """Create the GitHub client selected by configuration.

    Returns:
        ``InMemoryGithubClient`` when ``GITHUB_CLIENT_MODE=fake``,
        otherwise an ``HttpGithubClient`` on the shared httpx pool
    """
    settings = get_settings()
    if settings.github_client_mode == "fake":
        return InMemoryGithubClient()

    return HttpGithubClient(
        http_client=get_github_http_client(),
        base_url=settings.github_api_url,
        token=settings.github_api_token,
        retry_config=RetryConfig(
            max_retries=settings.github_max_retries,
            base_delay=GITHUB_RETRY_BASE_DELAY,
            max_delay=GITHUB_RETRY_MAX_DELAY,
        ),
    )


def get_github_client() -> GithubClient:
    """FastAPI dependency providing the profile lookup capability."""
    return create_github_client()
