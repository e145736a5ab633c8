import logging
import sys
from pathlib import Path
from typing import Optional

from localcast_host.local.config import effective_settings as config

LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'


class MainFormatter(logging.Formatter):
    """The formatter shared by every handler the host installs."""

    def __init__(self) -> None:
        super().__init__(fmt=LOG_FORMAT)

    def formatException(self, ei) -> str:
        # Keep tracebacks indented under their log line.
        text = super().formatException(ei)
        return "\n".join("    " + line for line in text.splitlines())


def setup_logging(console_level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """
    Configures the root logger for the host.
    This sets up a console handler and, when a log file is configured, a file
    handler, clearing any previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    :param log_file: Optional log file; defaults to `LOG_FILE_PATH` from the settings.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)

    # --- File Handler (conditional) ---
    log_file = log_file or config.LOG_FILE_PATH
    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(MainFormatter())
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize file logging handler: {e}. Logging to file will be disabled.")


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Maps a level name such as 'debug' to its logging constant."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default
