import logging
import logging.config
import os

from core.config import LOG_LEVEL, LOG_DIR


def build_logging_config(level: str = LOG_LEVEL, log_dir: str = LOG_DIR) -> dict:
    """Build the dictConfig for the API. File handlers are only added when a log directory is set."""
    handlers = {
        "console": {
            "level": level,
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    }

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers["file_app"] = {
            "level": "DEBUG",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": os.path.join(log_dir, "app.log"),
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "encoding": "utf-8",
            "formatter": "standard",
        }
        handlers["file_error"] = {
            "level": "ERROR",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": os.path.join(log_dir, "app.error.log"),
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "encoding": "utf-8",
            "formatter": "standard",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "root": {
            "handlers": list(handlers.keys()),
            "level": "DEBUG" if log_dir else level,
        },
    }


def setup_logging():
    """Apply default logging configuration."""
    logging.config.dictConfig(build_logging_config())


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with standard configuration."""
    if not logging.getLogger().handlers:
        setup_logging()

    return logging.getLogger(name)
