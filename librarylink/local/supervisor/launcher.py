import sys
import logging
import subprocess
from typing import List
from librarylink.log import get_report_logger
from librarylink.local.config import effective_settings as config
from librarylink.local.supervisor.models import (
    Failed, FullySupervisable, LaunchError, LaunchResult, LaunchedUnsupervisable,
)

log = logging.getLogger(__name__)
report = get_report_logger("launcher")


#* --- Launch Mechanisms ---
def activate_via_service(app_id: str) -> int:
    """
    Launches the app through the platform's application activation service.

    :param app_id: The Application User Model ID to activate.
    :return: The pid of the launched process.
    :raises LaunchError: If the service is unavailable or rejects the activation.
    """
    if sys.platform != "win32":
        raise LaunchError(f"Application activation service is not available on '{sys.platform}'")

    from librarylink.local.supervisor import activation
    return activation.activate_application(app_id)

def get_shell_launch_args(app_id: str) -> List[str]:
    """Returns the command line that opens the app through its shell alias."""
    return [
        config.POWERSHELL_EXECUTABLE,
        "-Command", f'Start-Process "shell:appsFolder\\{app_id}"',
    ]

def launch_via_shell(app_id: str) -> None:
    """
    Opens the app through the shell. The resulting pid is not observable.

    :param app_id: The Application User Model ID to open.
    :raises LaunchError: If the shell cannot be run or reports a failure.
    """
    args = get_shell_launch_args(app_id)
    log.debug(f"Running shell fallback: {args}")
    try:
        result = subprocess.run(args, capture_output=True, timeout=config.SHELL_LAUNCH_TIMEOUT, check=False)
    except subprocess.TimeoutExpired as e:
        raise LaunchError(f"PowerShell command timed out after {e.timeout} seconds") from e
    except OSError as e:
        raise LaunchError(f"Failed to execute PowerShell command: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
        raise LaunchError(f"PowerShell command failed: {stderr or f'exit code {result.returncode}'}")


#* --- Two-tier Launch ---
def launch_app(app_id: str) -> LaunchResult:
    """
    Launches an application, falling back to the shell if activation fails.

    :param app_id: The Application User Model ID to launch.
    :return: FullySupervisable with the pid, LaunchedUnsupervisable when only the
             shell fallback worked, or Failed carrying both failure messages.
    """
    report.info(f"Launching application with AUMID: {app_id}")
    try:
        pid = activate_via_service(app_id)
    except LaunchError as e:
        primary_error = str(e)
    else:
        report.info(f"Successfully launched app! Process ID: {pid}")
        return FullySupervisable(pid)

    report.info(f"Failed to launch app: {primary_error}")
    report.info("Trying fallback launch method...")
    try:
        launch_via_shell(app_id)
    except LaunchError as e:
        report.info(f"All launch methods failed: {e}")
        return Failed([primary_error, str(e)])

    report.info("App launched using fallback method (no process ID available)")
    report.info("Process monitoring not available with fallback method")
    return LaunchedUnsupervisable(primary_error)
