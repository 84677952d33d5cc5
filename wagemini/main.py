"""wagemini — Main entry point."""

import logging
import os
from typing import Optional

import uvicorn

from .config import Settings, load_settings
from .server import create_app

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_log_file = os.path.expanduser("~/wagemini.log")

logging.basicConfig(
    level=logging.INFO,
    format=_log_format,
    handlers=[
        logging.StreamHandler(),                          # stderr (console)
        logging.FileHandler(_log_file, encoding="utf-8"), # ~/wagemini.log
    ],
)
logger = logging.getLogger("wagemini")


async def run(settings: Optional[Settings] = None):
    """Start the webhook server and serve until interrupted."""
    settings = settings or load_settings()
    if settings.debug:
        logger.setLevel(logging.DEBUG)

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep our logging setup
    )
    server = uvicorn.Server(config)

    logger.info(f"WhatsApp Gemini assistant listening on {settings.host}:{settings.port}")
    await server.serve()
