import logging
import sys

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from todod.core.config import Settings, load_settings
from todod.core.logging import configure_logging
from todod.main import create_app

logger = logging.getLogger(__name__)


def build_server(settings: Settings, app: FastAPI | None = None) -> uvicorn.Server:
    """Configure uvicorn to serve the app on ``server_addr``.

    SIGINT/SIGTERM make uvicorn stop accepting connections and wait up to
    ``server_shutdown_timeout`` for in-flight requests before cancelling them.
    """
    config = uvicorn.Config(
        app=app if app is not None else create_app(settings),
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_config=None,
        log_level=settings.log_level.lower(),
        access_log=True,
        timeout_graceful_shutdown=settings.server_shutdown_timeout.total_seconds(),
    )
    return uvicorn.Server(config)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    try:
        settings = load_settings(argv)
    except ValidationError as e:
        logger.error(f"invalid configuration: {e}")
        return 1
    configure_logging(settings.log_level)

    server = build_server(settings)
    server.run()
    if not server.started:
        logger.error("could not start api server")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
