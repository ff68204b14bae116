"""Server-rendered web routes."""

from src.web.router import web_router

__all__ = ["web_router"]
