"""Run the RSVP server: python -m rsvp"""

import logging

import uvicorn

from rsvp.config import get_settings

logger = logging.getLogger("rsvp")


def main() -> None:
    settings = get_settings()

    # Importing the app configures logging
    from rsvp.main import app

    logger.info("Listening on http://localhost:%d (storage=%s)", settings.port, settings.storage)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # Live feeds never finish on their own
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )


if __name__ == "__main__":
    main()
