"""
Local package for the LibraryLink launcher.

This package provides the merged configuration, the installed-application
catalog, the console commands, and the process supervisor.
"""

from .config import effective_settings

__all__ = ["effective_settings"]
