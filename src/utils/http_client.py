"""Shared persistent httpx client for external API calls.

Using a persistent client avoids creating a new TCP connection + TLS handshake
for every profile lookup.
"""

import httpx

from src.constants import HTTPX_TIMEOUT

# Connection pool limits
_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_github_client: httpx.AsyncClient | None = None


def get_github_http_client() -> httpx.AsyncClient:
    """Get persistent httpx client for GitHub REST API calls."""
    global _github_client
    if _github_client is None or _github_client.is_closed:
        _github_client = httpx.AsyncClient(
            timeout=HTTPX_TIMEOUT,
            limits=_POOL_LIMITS,
            http2=False,
        )
    return _github_client


async def close_all_clients() -> None:
    """Close all persistent httpx clients. Call during app shutdown."""
    global _github_client
    if _github_client is not None:
        await _github_client.aclose()
        _github_client = None
