"""
Runtime configuration, read from environment variables.

    PORT                   -- listening port (default 3000)
    HOST                   -- bind address (default 0.0.0.0)
    RSVP_DATA_FILE         -- JSON file holding the attendee list
    RSVP_STATIC_DIR        -- directory served for every other GET
    RSVP_STORAGE           -- "file" (default) or "memory"
    RSVP_SHUTDOWN_TIMEOUT  -- seconds open streams get before shutdown cancels them (default 5)
    LOG_LEVEL              -- root log level (default INFO)
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

SERVICE_NAME = "asado-rsvp"
VERSION = "1.0.0"

PROJECT_ROOT = Path(__file__).resolve().parent.parent

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

STORAGE_BACKENDS = ("file", "memory")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    data_file: Path = PROJECT_ROOT / "attendees.json"
    static_dir: Path = PROJECT_ROOT / "frontend"
    storage: str = "file"
    shutdown_timeout: int = 5
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        storage = os.getenv("RSVP_STORAGE", "file").strip().lower()
        if storage not in STORAGE_BACKENDS:
            raise ValueError(f"RSVP_STORAGE must be one of {STORAGE_BACKENDS}, got {storage!r}")

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            data_file=Path(os.getenv("RSVP_DATA_FILE", str(PROJECT_ROOT / "attendees.json"))),
            static_dir=Path(os.getenv("RSVP_STATIC_DIR", str(PROJECT_ROOT / "frontend"))),
            storage=storage,
            shutdown_timeout=int(os.getenv("RSVP_SHUTDOWN_TIMEOUT", "5")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str) -> None:
    """Root handler with the service log format. No-op if one is already set."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
