"""Web server entrypoint.

Runs the Starlette web application using uvicorn. The serial ingestor runs
inside the server process, so use a single worker:

    uvicorn soilmon.server:create_app --factory --port 3000

Usage: python -m soilmon.server
"""
import uvicorn

from soilmon.lib.config import get_settings


def main() -> None:
    """Run the web server."""
    server_cfg = get_settings().server
    uvicorn.run(
        "soilmon.server:create_app",
        factory=True,
        host=server_cfg.host,
        port=server_cfg.port,
    )


if __name__ == "__main__":
    main()
