"""Logging configuration for the application."""

import logging
import sys

from portal.core.config import get_settings
from portal.shared.context import get_identity_context

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[subject=%(subject_id)s record=%(record_id)s] %(message)s"
)


class IdentityContextFilter(logging.Filter):
    """Stamp each record with the request's subject and directory record ids ("-" when anonymous)."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_identity_context()
        record.subject_id = context.subject_id or "-"
        record.record_id = context.record_id or "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(IdentityContextFilter())
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[handler],
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.
    """
    return logging.getLogger(name)
