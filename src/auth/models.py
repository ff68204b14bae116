"""Authentication-related Pydantic models."""

from pydantic import BaseModel


class GitHubAccount(BaseModel):
    """GitHub account data returned to the OAuth sign-in flow."""

    id: int
    login: str
    email: str | None = None
    avatar_url: str | None = None
    name: str | None = None
