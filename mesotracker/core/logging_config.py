"""Logging setup (stdlib logging, configured once at startup)."""

from logging.config import dictConfig


def configure_logging(level: str = "INFO") -> None:
    """Route app and uvicorn loggers through one console handler."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "mesotracker": {"handlers": ["console"], "level": level.upper(), "propagate": False},
                "uvicorn.error": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            },
        }
    )
