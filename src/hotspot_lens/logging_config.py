"""Logging for Hotspot Lens.

Everything logs under the ``hotspot_lens`` logger. The CLI configures it
once per command from the resolved ``HotspotConfig.verbosity``; library
users who never call :func:`setup_logging` get the standard ``logging``
defaults.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "hotspot_lens"

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route ``hotspot_lens`` records to stderr through rich, and optionally to a file.

    Calling again replaces the handlers installed by the previous call, so
    the level always reflects the latest configuration.

    Args:
        verbosity: One of ``quiet``, ``normal`` or ``verbose``
        log_file: Append a plain-text copy of every record at the same level

    Returns:
        The configured ``hotspot_lens`` logger
    """
    try:
        level = VERBOSITY_LEVELS[verbosity]
    except KeyError:
        raise ValueError(f"unknown verbosity {verbosity!r}") from None
    verbose = verbosity == "verbose"

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_hotspot_lens", False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        handler._hotspot_lens = True  # type: ignore[attr-defined]
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the ``hotspot_lens`` namespace.

    Args:
        name: Module name; prefixed with ``hotspot_lens.`` when it is not
              already. ``None`` returns the package logger itself.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
