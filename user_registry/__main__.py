"""Command-line entry point for the user registry service."""

import logging

import uvicorn

from user_registry.config import get_settings
from user_registry.main import create_app

logger = logging.getLogger("user_registry")


def main() -> None:
    """Run the API server on the configured host and port."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logger.info(f"Starting user registry on {settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
