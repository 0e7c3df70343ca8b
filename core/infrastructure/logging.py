"""
Logging infrastructure.

Provides logging utilities shared by the orchestration and API layers.
"""
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# loggers that got their own handler before root logging was configured
_standalone: set[str] = set()


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once at application startup.

    Loggers handed out earlier by get_logger drop their own handler and
    defer to the root configuration.

    Args:
        level: Log level name (DEBUG, INFO, ...)
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for name in _standalone:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
    _standalone.clear()


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance.

    Args:
        name: Logger name (usually module name)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        _standalone.add(name)
    return logger
