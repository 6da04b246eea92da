"""
Logging module for the application.
This module provides functionality to set up console and file logging and
to obtain the loggers that carry user-facing progress lines.
"""

from .setup import setup_logging, get_report_logger

__all__ = ["setup_logging", "get_report_logger"]
