"""Process-wide logging setup for the finance-tagger backend."""

import logging

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"

# Library loggers that drown out sync progress at INFO/DEBUG
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic.runtime.migration",
    "httpx",
    "httpcore",
    "urllib3",
    "plaid",
)


def setup_logging() -> None:
    """Install the root handler at ``settings.LOG_LEVEL``.

    Safe to call more than once; the root handler is replaced each time.
    """
    level = logging.getLevelName(settings.LOG_LEVEL)
    logging.basicConfig(format=LOG_FORMAT, datefmt="%H:%M:%S", level=level, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured at %s", settings.LOG_LEVEL)
