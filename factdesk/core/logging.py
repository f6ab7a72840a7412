import logging
from logging.config import dictConfig
import sys
from .config import settings

LOG_LEVEL = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()

# Define log configuration
log_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": LOG_LEVEL,
            "formatter": "default",
            "stream": sys.stdout,
        },
    },
    "loggers": {
        "factdesk": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            # Let records reach the root logger so pytest's caplog sees them
            "propagate": True
        },
    },
    "root": {
        "level": LOG_LEVEL,
    },
}

# Configure logging
dictConfig(log_config)

# Create logger instance
logger = logging.getLogger("factdesk")
