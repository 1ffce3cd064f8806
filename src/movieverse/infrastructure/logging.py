"""Logging configuration and setup."""

import logging
import logging.handlers
from pathlib import Path

from ..config.models import LoggingConfig

PACKAGE_LOGGER = "movieverse"


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """Configure the ``movieverse`` logger hierarchy.

    Console output goes to stderr so command output stays clean on stdout.
    Calling this again replaces the handlers installed by the previous call.

    Args:
        config: Logging configuration.

    Returns:
        The package logger.
    """
    level = getattr(logging, config.level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Connection chatter only matters when debugging the transport
    transport_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    logging.getLogger("aiohttp").setLevel(transport_level)

    logger.debug(f"Logging configured with level {config.level}")
    return logger


class LoggerMixin:
    """Mixin giving each class a logger named after its module and class."""

    @property
    def logger(self) -> logging.Logger:
        """Logger for this class."""
        cls = self.__class__
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")
