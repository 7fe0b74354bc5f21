"""
Logging configuration shared by all services.

``setup_logging`` configures the root logger with a console handler and
an optional file handler.  When several services run in one process
(see ``run.py``) the first call wins and later calls are no-ops, so
every service writes through the same handlers.

Each record is tagged with the service that handled the request it was
logged under.  ``create_app`` sets :data:`current_service` for the
duration of every request and :class:`ServiceFilter` copies it onto the
record, so interleaved output of several services stays attributable::

    2024-05-01 12:00:00 [WARNING] [users] shop_services.services.user_service: Failed login for a@b.c
"""

import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(service)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Name of the service handling the current request; "-" outside requests.
current_service: ContextVar[str] = ContextVar("current_service", default="-")


class ServiceFilter(logging.Filter):
    """Add a ``service`` attribute to every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = current_service.get()
        return True


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured, e.g. by another service in the same process
        # or by the test runner.
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    service_filter = ServiceFilter()

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(service_filter)
        logger.addHandler(handler)
