import logging

import uvicorn

from visionscript.config import HOST, LOG_LEVEL, PORT

logging.basicConfig(
    level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s"
)
# Keep SDK transport chatter out of the service log
for name in ("httpx", "httpcore"):
    logging.getLogger(name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def main():
    """Entry point for the VisionScript web service."""
    from visionscript.api import create_app

    app = create_app()
    logger.info(f"Serving on http://{HOST}:{PORT}")
    try:
        uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


if __name__ == "__main__":
    main()
