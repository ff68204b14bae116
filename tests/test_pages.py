"""Tests for the public server-rendered pages."""

import pytest
from httpx import AsyncClient

from tests.conftest import parse_html


class TestPublicPages:
    """Tests for Home / About / Contact / Privacy."""

    @pytest.mark.asyncio
    async def test_home_page(self, client: AsyncClient):
        """Test that the home page renders as HTML."""
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["/", "/Index", "/About", "/Contact", "/Privacy"])
    async def test_application_endpoints(self, client: AsyncClient, url: str):
        """Test that every public page is reachable anonymously."""
        response = await client.get(url)

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"

    @pytest.mark.asyncio
    async def test_navbar_highlights_current_page(self, client: AsyncClient):
        """Test that the navbar marks the page being shown."""
        response = await client.get("/About")
        active = parse_html(response).select_one(".nav-item.active a")

        assert active is not None
        assert active["href"] == "/About"

    @pytest.mark.asyncio
    async def test_anonymous_navbar_shows_login(self, client: AsyncClient):
        """Test that anonymous visitors get a login link."""
        html = parse_html(await client.get("/"))

        assert html.select_one("#login") is not None
        assert html.select_one("#logout-form") is None

    @pytest.mark.asyncio
    async def test_authenticated_navbar_shows_user(self, authenticated_client: AsyncClient):
        """Test that signed-in users see their name and a logout form."""
        html = parse_html(await authenticated_client.get("/"))

        assert "testuser" in html.select_one("#manage").get_text()
        assert html.select_one("#logout-form") is not None

    @pytest.mark.asyncio
    async def test_unknown_page_renders_html_404(self, client: AsyncClient):
        """Test that unknown paths render the error page."""
        response = await client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert "404" in parse_html(response).select_one("h1").get_text()

    @pytest.mark.asyncio
    async def test_error_page_is_served(self, client: AsyncClient):
        """Test that visiting the error page directly is not itself an error."""
        response = await client.get("/Error")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert parse_html(response).select_one("h1").get_text().strip() == "Error"

    @pytest.mark.asyncio
    async def test_security_headers(self, client: AsyncClient):
        """Test that security headers are set on pages."""
        response = await client.get("/")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "Strict-Transport-Security" not in response.headers

    @pytest.mark.asyncio
    async def test_static_stylesheet(self, client: AsyncClient):
        """Test that the site stylesheet is served."""
        response = await client.get("/static/css/site.css")

        assert response.status_code == 200
        assert "text/css" in response.headers["content-type"]
