"""Logger configuration bootstrap.

Where: src/tagbridge/platform/logging/config.py
What: Configure the shared ``tagbridge`` logger with console and file handlers.
Why: Every layer logs through one named logger configured in one place.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Final

from rich.console import Console

from tagbridge.config.paths import default_log_file

from .handlers import TagBridgeRichHandler

LOGGER_NAME: Final[str] = "tagbridge"
DEFAULT_LOG_FILE: Final[Path] = default_log_file()


def setup_logger(
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """Set up and configure the application logger.

    Args:
        log_file: Rotating log file target. ``None`` keeps logging console-only.
        console_level: Threshold for the Rich console handler.
        file_level: Threshold for the file handler.

    Returns:
        logging.Logger: The configured ``tagbridge`` logger.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    console = Console(stderr=True, soft_wrap=True)
    console_handler = TagBridgeRichHandler(console=console)
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        resolved_log_file = Path(log_file).expanduser().resolve()
        os.makedirs(resolved_log_file.parent, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            resolved_log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


logger: Final[logging.Logger] = setup_logger(log_file=DEFAULT_LOG_FILE)


__all__ = ["DEFAULT_LOG_FILE", "LOGGER_NAME", "logger", "setup_logger"]
