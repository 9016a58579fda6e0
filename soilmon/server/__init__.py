"""Web server exposing the latest reading over HTTP, WebSocket and SSE."""

from .entrypoint import create_app

__all__ = ["create_app"]
