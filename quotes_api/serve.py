"""Run the quote service under uvicorn.

Host, port and the graceful shutdown window come from ``Settings``
(``SERVER_HOST``, ``SERVER_PORT``, ``SHUTDOWN_TIMEOUT_SECONDS``). Uvicorn
handles SIGINT/SIGTERM: in-flight requests finish, then the lifespan hook
disposes the database engine.

Usage:
    quote-service
    python -m quotes_api.serve
"""
from uvicorn import Config, Server

from quotes_api.core.config import Settings
from quotes_api.main import create_app


def build_server(settings: Settings | None = None) -> Server:
    settings = settings or Settings()
    config = Config(
        app=create_app(settings),
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SECONDS,
    )
    return Server(config)


def main() -> None:
    build_server().run()


if __name__ == "__main__":
    main()
