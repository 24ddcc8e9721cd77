"""Logging setup for props_codegen.

Modules obtain their logger through :func:`get_logger`. As a library the
package only installs a ``NullHandler``; applications opt in to console
output with :func:`configure_logging`.
"""

import logging
import os

from rich.logging import RichHandler

LOGGER_NAME = "props_codegen"
LOG_LEVEL_ENV = "PROPS_CODEGEN_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger whose records propagate to the ``props_codegen`` logger.
    """
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str | int | None = None, rich_output: bool = True
) -> logging.Logger:
    """Attach a console handler to the package logger.

    Args:
        level: Log level name or number. Falls back to the
            ``PROPS_CODEGEN_LOG_LEVEL`` environment variable, then WARNING.
        rich_output: Use a ``RichHandler`` instead of a plain stream handler.

    Returns:
        The configured package logger.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LEVEL)
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    if rich_output:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug("Logging configured (level=%s, rich=%s)", level, rich_output)
    return logger
