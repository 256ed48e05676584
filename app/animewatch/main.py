"""Entrypoint for running the Animewatch backend locally."""

from __future__ import annotations

from .config import DEFAULT_HOST, DEFAULT_LOG_LEVEL, DEFAULT_PORT


def run(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = DEFAULT_LOG_LEVEL,
) -> None:
    """Run the ASGI application using Uvicorn."""

    import uvicorn

    from .app import app

    uvicorn.run(app, host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    run()
