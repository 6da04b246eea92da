"""
This module contains the configuration settings for the LibraryLink launcher.
It defines process-supervision limits, shell integration, and logging options.
Values marked as modifiable can be overridden through the JSON overrides file
loaded by `librarylink.local.config`.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)

#* --- Core Paths ---
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent  # Project Root
OVERRIDES_JSON_PATH = pathlib.Path(os.getenv("LIBRARYLINK_OVERRIDES", str(BASE_DIR / "overrides.json")))

#* --- Process Supervision ---
# Fixed size of the process table snapshot scanned when looking for a successor.
# Processes beyond this many entries are not considered.
PROCESS_ENUM_CAPACITY = 1024
# Reported in place of an executable path that could not be queried.
UNKNOWN_PROCESS_PATH = "<Unknown>"
SUPERVISOR_PROCESS_TITLE = "LibraryLink - Supervisor"

#* --- Shell Integration ---
POWERSHELL_EXECUTABLE = os.getenv("LIBRARYLINK_POWERSHELL", "powershell")
SHELL_LAUNCH_TIMEOUT = int(os.getenv("LIBRARYLINK_SHELL_LAUNCH_TIMEOUT", "30"))  # seconds
APP_QUERY_TIMEOUT = int(os.getenv("LIBRARYLINK_APP_QUERY_TIMEOUT", "60"))        # seconds
SHOW_PACKAGE_DETAILS = os.getenv("LIBRARYLINK_SHOW_PACKAGE_DETAILS", "True").lower() in ('true', '1', 't')

#* --- Logging ---
VERBOSE_LOGGING = os.getenv("LIBRARYLINK_VERBOSE", "False").lower() in ('true', '1', 't')
LOG_FILE_PATH = os.getenv("LIBRARYLINK_LOG_FILE", "")
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 5

#* --- MODIFIABLE SETTINGS (Changeable through the overrides file) ---
MODIFIABLE_SETTINGS = {
    # Shell
    "POWERSHELL_EXECUTABLE", "SHELL_LAUNCH_TIMEOUT", "APP_QUERY_TIMEOUT", "SHOW_PACKAGE_DETAILS",
    # Logging
    "VERBOSE_LOGGING", "LOG_FILE_PATH", "LOG_FILE_MAX_BYTES", "LOG_FILE_BACKUP_COUNT",
}
