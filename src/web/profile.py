"""GitHub profile page state and lookup flow."""

import logging
import time
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.constants import USERNAME_MAX_LENGTH, USERNAME_PATTERN
from src.services.github import GithubClient, GithubClientError, GithubUser
from src.utils.logging import LogContext
from src.utils.metrics import metrics

logger = logging.getLogger(__name__)


class LookupStatus(str, Enum):
    """Where the profile page is in its submit/lookup cycle."""

    INITIAL = "initial"
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass(frozen=True)
class ProfilePageState:
    """Request-scoped state rendered by the profile page."""

    user_name: str = ""
    status: LookupStatus = LookupStatus.INITIAL
    profile: GithubUser | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class ProfileLookupForm(BaseModel):
    """Submitted lookup form (``Input_UserName``)."""

    model_config = ConfigDict(populate_by_name=True)

    user_name: str = Field(
        alias="Input_UserName",
        min_length=1,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    )

    @field_validator("user_name", mode="before")
    @classmethod
    def strip_user_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


_FORM_ERRORS = {
    "string_too_long": "profile.errors.too_long",
    "string_pattern_mismatch": "profile.errors.invalid",
}


def parse_lookup_form(raw_user_name: str | None) -> tuple[ProfileLookupForm | None, ProfilePageState | None]:
    """Validate the submitted username.

    Returns:
        (form, None) when valid, or (None, invalid page state) otherwise
    """
    try:
        return ProfileLookupForm.model_validate({"Input_UserName": raw_user_name or ""}), None
    except ValidationError as e:
        error = _FORM_ERRORS.get(e.errors()[0]["type"], "profile.errors.required")
        return None, ProfilePageState(
            user_name=(raw_user_name or "").strip(),
            status=LookupStatus.INVALID,
            error=error,
        )


async def lookup_profile(username: str, client: GithubClient) -> ProfilePageState:
    """Run one lookup against the injected client and build the page state.

    Absence is a normal outcome (NOT_FOUND). Client errors become FAILED and
    are never reported as "not found".
    """
    log = LogContext(logger, user_name=username)
    start = time.monotonic()

    try:
        profile = await client.get_user(username)
    except GithubClientError as e:
        log.warning(f"GitHub lookup failed: {e}")
        metrics.github_lookups_total.inc(outcome="failed")
        return ProfilePageState(
            user_name=username,
            status=LookupStatus.FAILED,
            error="profile.errors.unavailable",
        )
    finally:
        metrics.github_lookup_duration_seconds.observe(time.monotonic() - start)

    if profile is None:
        log.debug("GitHub user not found")
        metrics.github_lookups_total.inc(outcome="not_found")
        return ProfilePageState(user_name=username, status=LookupStatus.NOT_FOUND)

    log.debug(f"GitHub user found: {profile.login}")
    metrics.github_lookups_total.inc(outcome="found")
    return ProfilePageState(user_name=username, status=LookupStatus.FOUND, profile=profile)
