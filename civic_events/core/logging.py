# civic_events/core/logging.py
import logging
import logging.config

from civic_events.core.config import settings

_configured = False

def setup_logging(level: str | None = None) -> None:
    """Configura o logger raiz uma única vez (console)."""
    global _configured
    if _configured:
        return
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "root": {"handlers": ["console"], "level": level or settings.LOG_LEVEL},
        "loggers": {
            # SQL só em DEBUG explícito
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })
    _configured = True
