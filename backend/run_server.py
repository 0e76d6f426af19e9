"""Simple server runner that keeps uvicorn alive."""
import logging
import signal
import sys

import uvicorn

from voicepos.core.config import settings
from voicepos.core.logging import setup_logging

logger = logging.getLogger("run_server")


def handle_signal(sig, frame):
    logger.info(f"Received signal {sig}, shutting down gracefully...")
    sys.exit(0)


signal.signal(signal.SIGINT, handle_signal)
signal.signal(signal.SIGTERM, handle_signal)

if __name__ == "__main__":
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "voicepos.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
