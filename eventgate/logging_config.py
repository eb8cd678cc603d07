"""
Logging setup for the Eventgate server.

One dict config covers the application loggers and uvicorn's own loggers,
so `LOG_LEVEL` applies to both. Access lines for the health endpoint are
dropped because orchestrators poll it every few seconds.
"""

import logging
import logging.config
from typing import Any, Dict

HEALTH_CHECK_PATH = "/healthz"
ACCESS_LOGGER = "uvicorn.access"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers that write through the plain handler, besides the access log
APP_LOGGERS = ("eventgate", "uvicorn", "uvicorn.error")


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access records for GET requests to the health endpoint."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != ACCESS_LOGGER:
            return True
        message = record.getMessage()
        return not ("GET" in message and HEALTH_CHECK_PATH in message)


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build the dictConfig mapping for the given level.

    Args:
        level: Level name applied to the root, application and uvicorn loggers

    Returns:
        Mapping suitable for logging.config.dictConfig and uvicorn's log_config
    """
    level = level.upper()
    loggers = {name: _logger("plain", level) for name in APP_LOGGERS}
    loggers[ACCESS_LOGGER] = _logger("access", level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"skip_health_checks": {"()": HealthCheckFilter}},
        "formatters": {
            "plain": {"format": LOG_FORMAT},
            "access": {"format": "%(asctime)s - %(message)s"},
        },
        "handlers": {
            "plain": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["skip_health_checks"],
            },
        },
        "loggers": loggers,
        "root": {"level": level, "handlers": ["plain"]},
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(get_logging_config(level))
