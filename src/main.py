"""
Application entry point.

Loads the settings, builds the services and serves the webhook endpoints
with uvicorn.
"""

import asyncio
import logging

import uvicorn

from src.config import get_settings
from src.server import build_services, create_app

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main() -> None:
    """Application entry point.

    Runs the following in order:
    1. Load settings from the environment
    2. Build the stores, clients and Bolt app
    3. Create the FastAPI app
    4. Serve it on the configured port
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    services = build_services(settings)
    app = create_app(services)

    config = uvicorn.Config(app, host="0.0.0.0", port=settings.port, log_config=None)
    server = uvicorn.Server(config)

    logger.info("Server up on port %d", settings.port)
    await server.serve()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
