"""
Application settings and the shared logger.

Values come from the environment, with a `.env` file in the working
directory loaded first when present.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173")
BOARD_DATA_PATH = os.getenv("BOARD_DATA_PATH", "./board-data")
SERVER_ENV = os.getenv("SERVER_ENV", "development")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8080"))
CLIENT_DIST_PATH = os.getenv("CLIENT_DIST_PATH", "./client/dist")
API_BASE_URL = os.getenv("API_BASE_URL", f"http://localhost:{SERVER_PORT}")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else arrived through `extra=`
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Append `extra={...}` context to the message as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in _RESERVED_ATTRS}
        if extras:
            message += " | " + " ".join(f"{k}={v!r}" for k, v in extras.items())
        return message


def allowed_origins_list() -> list:
    """Return the configured CORS origins as a sanitized list."""
    return [origin.strip() for origin in ALLOWED_ORIGINS.split(",") if origin.strip()]


def _build_logger() -> logging.Logger:
    handler = logging.StreamHandler()
    handler.setFormatter(ExtraFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    log = logging.getLogger("sprint_board")
    if not log.handlers:
        log.addHandler(handler)
    log.setLevel(LOG_LEVEL)
    return log


logger = _build_logger()
