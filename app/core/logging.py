"""
➡️ But : Configurer les logs de l'application (console, format, niveau).

setup_logging() applique une configuration dictConfig unique ;
les modules récupèrent ensuite leur logger via get_logger("ingestion"), get_logger("rpc")…
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

logger = logging.getLogger("gameplay")


def setup_logging(level: str = "INFO") -> None:
    level = level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "gameplay": {"handlers": ["console"], "level": level, "propagate": False},
                "uvicorn.error": {"level": level},
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Logger enfant de "gameplay" (ex: gameplay.ingestion)."""
    return logger.getChild(name)
