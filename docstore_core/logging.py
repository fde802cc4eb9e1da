"""
Centralized logging configuration for docstore.
Initializes loguru and intercepts standard library logging.
"""

import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Default handler from documents for intercepting standard library logging messages.
    See: https://loguru.readthedocs.io/en/stable/overview.html#entirely-compatible-with-standard-logging
    """

    def emit(self, record):
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", colorize: bool = True) -> None:
    """
    Configures loguru to handle all logs and output them to stderr.

    stdout is left to command output (the admin CLI prints JSON there).
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=level.upper(),
        colorize=colorize,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # The MinIO SDK and its HTTP pool log through the standard library
    for name in ["minio", "urllib3", "urllib3.connectionpool"]:
        _logger = logging.getLogger(name)
        _logger.handlers = [InterceptHandler()]
        _logger.propagate = False

    logger.debug(f"Logging initialized with Loguru at level {level.upper()}.")
