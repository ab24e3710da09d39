"""Logging setup for the viewer's dedicated logger."""

import logging

LOGGER_NAME = "mandelbrot_viewer"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s"


def setup_logging(level="INFO", log_file=None, fmt=DEFAULT_FORMAT):
    """
    Configure the "mandelbrot_viewer" logger.

    Only the package logger is configured, not the root logger, so the
    verbose output of third-party libraries like Numba is not captured.
    Calling this again replaces the previous handlers instead of stacking
    duplicates.

    Args:
        level: Logging level name or number
        log_file: Optional path of a file that receives a copy of the log
        fmt: logging.Formatter format string

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(fmt)

    if logger.handlers:
        logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at level %s", logging.getLevelName(logger.level))
    return logger
