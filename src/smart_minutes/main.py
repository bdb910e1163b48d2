"""Entry point for the smart minutes service."""

import os

import uvicorn
from ddtrace import patch_all

from smart_minutes.app import create_app
from smart_minutes.logging import setup_logging

logger = setup_logging()
patch_all()

app = create_app()


def main():
    """Starts the API server."""
    logger.info("Starting smart-minutes service")
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
