"""GitHub profile lookup.

Usage:
    from src.services.github import HttpGithubClient

    client = HttpGithubClient(http_client=httpx.AsyncClient())
    user = await client.get_user("octocat")  # GithubUser or None
"""

from src.services.github.client import (
    DEFAULT_FAKE_USERS,
    GithubClient,
    GithubClientError,
    GithubUnavailableError,
    HttpGithubClient,
    InMemoryGithubClient,
    create_github_client,
    get_github_client,
    is_valid_login,
)
from src.services.github.models import GithubUser

__all__ = [
    "DEFAULT_FAKE_USERS",
    "GithubClient",
    "GithubClientError",
    "GithubUnavailableError",
    "GithubUser",
    "HttpGithubClient",
    "InMemoryGithubClient",
    "create_github_client",
    "get_github_client",
    "is_valid_login",
]
