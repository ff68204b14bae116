"""End-to-end tests for the GitHub profile page."""

import pytest
from httpx import AsyncClient

from src.services.github import GithubUnavailableError, GithubUser
from tests.conftest import parse_html


class UnavailableGithubClient:
    """Client whose backing service is down."""

    def __init__(self) -> None:
        self.calls = 0

    async def get_user(self, username: str) -> GithubUser | None:
        self.calls += 1
        raise GithubUnavailableError("connection refused")


class TestGithubProfilePage:
    """Tests for /GithubProfile."""

    @pytest.mark.asyncio
    async def test_initial_page_has_form_and_no_profile(self, client: AsyncClient):
        """Test that the page starts with an empty form."""
        response = await client.get("/GithubProfile")

        assert response.status_code == 200
        html = parse_html(response)
        form = html.select_one("form#user-profile")
        assert form is not None
        assert form.select_one("input[name=Input_UserName]")["value"] == ""
        assert html.select_one("#user-login") is None

    @pytest.mark.asyncio
    async def test_can_get_a_github_user(self, client: AsyncClient, submit_form):
        """Test the form round-trip for a known user."""
        page = await client.get("/GithubProfile")
        assert page.status_code == 200

        response = await submit_form(client, page, "#user-profile", {"Input_UserName": "user"})

        assert response.status_code == 200
        html = parse_html(response)
        assert html.select_one("#user-login").get_text() == "user"
        assert html.select_one("#user-name").get_text() == "John Doe"
        assert html.select_one("#user-company").get_text() == "Contoso Blockchain"

    @pytest.mark.asyncio
    async def test_unknown_user_renders_no_profile(self, client: AsyncClient, submit_form):
        """Test that an unknown username renders the not-found state."""
        page = await client.get("/GithubProfile")

        response = await submit_form(
            client, page, "#user-profile", {"Input_UserName": "doesnotexist"}
        )

        assert response.status_code == 200
        html = parse_html(response)
        assert html.select_one("#user-login") is None
        assert "doesnotexist" in html.select_one("#user-not-found").get_text()

    @pytest.mark.asyncio
    async def test_form_is_available_again_after_lookup(self, client: AsyncClient, submit_form):
        """Test that the page can be submitted again after a result."""
        page = await client.get("/GithubProfile")
        found = await submit_form(client, page, "#user-profile", {"Input_UserName": "user"})

        # Submit from the result page; the previous profile must not linger
        response = await submit_form(
            client, found, "#user-profile", {"Input_UserName": "doesnotexist"}
        )

        assert response.status_code == 200
        html = parse_html(response)
        assert html.select_one("form#user-profile") is not None
        assert html.select_one("#user-login") is None
        assert html.select_one("input[name=Input_UserName]")["value"] == "doesnotexist"

    @pytest.mark.asyncio
    async def test_username_is_trimmed(self, client: AsyncClient, submit_form):
        """Test that surrounding whitespace is ignored."""
        page = await client.get("/GithubProfile")

        response = await submit_form(client, page, "#user-profile", {"Input_UserName": "  user  "})

        assert parse_html(response).select_one("#user-login").get_text() == "user"

    @pytest.mark.asyncio
    async def test_blank_username_shows_validation_error(self, client: AsyncClient, submit_form):
        """Test that a blank username is rejected without a lookup."""
        page = await client.get("/GithubProfile")

        response = await submit_form(client, page, "#user-profile", {"Input_UserName": "   "})

        assert response.status_code == 200
        html = parse_html(response)
        assert html.select_one("#user-name-error") is not None
        assert html.select_one("#user-login") is None
        assert html.select_one("#user-not-found") is None

    @pytest.mark.asyncio
    async def test_too_long_username_shows_validation_error(self, client: AsyncClient, submit_form):
        """Test that usernames longer than GitHub allows are rejected."""
        page = await client.get("/GithubProfile")

        response = await submit_form(client, page, "#user-profile", {"Input_UserName": "a" * 40})

        assert response.status_code == 200
        assert "39" in parse_html(response).select_one("#user-name-error").get_text()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", [".", "..", "a b", "../orgs/github"])
    async def test_impossible_username_shows_validation_error(
        self, client: AsyncClient, submit_form, username: str
    ):
        """Test that names GitHub could never issue are rejected without a lookup."""
        page = await client.get("/GithubProfile")

        response = await submit_form(client, page, "#user-profile", {"Input_UserName": username})

        assert response.status_code == 200
        html = parse_html(response)
        assert "letters, digits" in html.select_one("#user-name-error").get_text()
        assert html.select_one("#user-login") is None
        assert html.select_one("#user-not-found") is None
        assert html.select_one("#lookup-error") is None

    @pytest.mark.asyncio
    async def test_post_without_token_is_rejected(self, client: AsyncClient):
        """Test that a post without the anti-forgery token fails."""
        await client.get("/GithubProfile")

        response = await client.post("/GithubProfile", data={"Input_UserName": "user"})

        assert response.status_code == 400
        assert parse_html(response).select_one("#user-login") is None

    @pytest.mark.asyncio
    async def test_post_with_wrong_token_is_rejected(self, client: AsyncClient):
        """Test that a forged token fails."""
        await client.get("/GithubProfile")

        response = await client.post(
            "/GithubProfile",
            data={"Input_UserName": "user", "__RequestVerificationToken": "forged"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unavailable_github_renders_error_state(self, client: AsyncClient, submit_form):
        """Test that transport failures are shown as errors, not as "not found"."""
        from src.main import app
        from src.services.github import get_github_client

        failing = UnavailableGithubClient()
        app.dependency_overrides[get_github_client] = lambda: failing
        page = await client.get("/GithubProfile")

        response = await submit_form(client, page, "#user-profile", {"Input_UserName": "user"})

        assert response.status_code == 502
        html = parse_html(response)
        assert html.select_one("#lookup-error") is not None
        assert html.select_one("#user-login") is None
        assert html.select_one("#user-not-found") is None
        assert html.select_one("form#user-profile") is not None
        assert failing.calls == 1

    @pytest.mark.asyncio
    async def test_profile_page_for_signed_in_user(self, authenticated_client: AsyncClient, submit_form):
        """Test that signed-in users can use the page too."""
        page = await authenticated_client.get("/GithubProfile")

        response = await submit_form(
            authenticated_client, page, "#user-profile", {"Input_UserName": "user"}
        )

        assert response.status_code == 200
        assert parse_html(response).select_one("#user-login").get_text() == "user"
