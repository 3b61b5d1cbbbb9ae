import logging
import os
import signal
import threading
from pathlib import Path

import uvicorn

from problem_registry.config.logging_setup import setup_logging
from problem_registry.config.settings import get_settings

logger = logging.getLogger("problem_registry.run")

PACKAGE_DIR = Path(__file__).parent


def setup_signal_handlers():
    """Install handlers for a graceful shutdown."""
    def signal_handler(signum, frame):
        logger.info(f"🛑 Received signal {signum}. Shutting down server...")

        active_threads = threading.active_count()
        if active_threads > 1:
            logger.info(f"📝 Waiting on {active_threads} active threads...")

        os._exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def main():
    """Start the API server."""
    settings = get_settings()
    setup_logging(settings.log_config_path)

    logger.info(f"✅ Server is running on port {settings.port}")
    logger.info(f"🌍 Environment: {settings.environment}")
    logger.info(f"📡 API ready at http://localhost:{settings.port}{settings.route_prefix}")

    setup_signal_handlers()

    uvicorn.run(
        "problem_registry.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        reload_dirs=[str(PACKAGE_DIR)] if settings.reload else None,
        log_config=None  # Keep the configuration applied above
    )


if __name__ == "__main__":
    main()
