import logging
import sys
from logging.handlers import RotatingFileHandler

from librarylink.local.config import effective_settings as config

REPORT_LOGGER_PREFIX = "report."


class MainFormatter(logging.Formatter):
    """A custom formatter to handle regular logs and raw progress report lines."""

    def format(self, record):
        # Progress reports are already human-readable, print them as they are.
        if record.name.startswith(REPORT_LOGGER_PREFIX):
            return record.getMessage()

        # Otherwise, use the default formatting.
        # Temporarily change the format string for the superclass call.
        original_format = self._style._fmt
        self._style._fmt = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
        formatted_message = super().format(record)
        self._style._fmt = original_format
        return formatted_message

def setup_logging(console_level: int = logging.INFO) -> None:
    """
    Configures the root logger for the application.
    This sets up handlers for the console and optionally a rotating log file,
    clearing any previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
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
    if config.LOG_FILE_PATH:
        try:
            file_handler = RotatingFileHandler(
                config.LOG_FILE_PATH,
                maxBytes=config.LOG_FILE_MAX_BYTES,
                backupCount=config.LOG_FILE_BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s')
            )
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize log file '{config.LOG_FILE_PATH}': {e}. Logging to file will be disabled.")


def get_report_logger(component: str) -> logging.Logger:
    """Returns the logger that carries user-facing progress lines for a component."""
    return logging.getLogger(f"{REPORT_LOGGER_PREFIX}{component}")
