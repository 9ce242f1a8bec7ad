import logging
import os
import sys
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


def is_rich_enabled() -> bool:
    """Check if Rich log rendering was requested through the environment."""
    return os.environ.get("LAUNCHER_RICH_UI", "false").lower() in ("true", "1", "yes")


def setup_logging(
    level: Union[int, str] = logging.INFO, stream=sys.stderr, fmt: Optional[str] = None
):
    """
    Sets up the root logger with a stream handler and basic formatting.
    Uses a Rich handler when LAUNCHER_RICH_UI is set, otherwise standard logging.
    Logs go to stderr so that status lines on stdout stay machine readable.
    Does nothing if handlers are already configured.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    if not root_logger.hasHandlers():
        if is_rich_enabled():
            handler = RichHandler(
                console=Console(stderr=True),
                show_path=level == logging.DEBUG,
                rich_tracebacks=True,
            )
        else:
            if fmt is None:
                if level == logging.DEBUG:
                    fmt = "%(asctime)s | %(levelname)-5s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
                else:
                    # Default format for INFO level and above
                    fmt = "%(asctime)s | %(levelname)-5s | %(message)s"

            handler = logging.StreamHandler(stream)
            handler.setFormatter(logging.Formatter(fmt))

        root_logger.setLevel(level)
        root_logger.addHandler(handler)

    # Optionally allow log level override via env var
    env_level = os.environ.get("LOG_LEVEL")
    if env_level:
        root_logger.setLevel(env_level.upper())

    # aiohttp and urllib3 are chatty at DEBUG
    for logger_name in ("aiohttp", "urllib3", "asyncio"):
        logging.getLogger(logger_name).setLevel(
            max(root_logger.level, logging.WARNING)
        )
