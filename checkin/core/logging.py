"""Logging configuration for the check-in service.

Every module logs through ``logging.getLogger(__name__)`` with short
event-style messages (``check_in_recorded``) and structured ``extra``
fields.  ``setup_logging`` installs one stdout handler on the root logger at
``settings.LOG_LEVEL``.
"""

import logging
import sys

from checkin.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "apscheduler")


def setup_logging() -> None:
    """Configure the root logger for the kiosk API.

    Safe to call more than once (tests and the lifespan hook both do): any
    previously installed handlers are replaced.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
