"""
Logging Configuration
Sets up the package logger for the CLI and for embedding applications.
"""
import logging
import sys


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configures the logger for the 'lenia_field' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.WARNING)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("lenia_field")
    logger.setLevel(level)

    # A second call replaces the handler instead of adding another
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(handler)

    logger.debug("Logging initialized.")
    return logger
