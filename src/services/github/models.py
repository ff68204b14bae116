"""GitHub profile value objects."""

from pydantic import BaseModel, ConfigDict


class GithubUser(BaseModel):
    """Public profile fields of a GitHub user.

    Built from the ``/users/{username}`` REST payload; unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    login: str
    name: str | None = None
    company: str | None = None
