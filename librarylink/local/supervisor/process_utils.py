import psutil
import logging
from typing import List, Optional
from librarylink.local.config import effective_settings as config
from librarylink.local.supervisor.models import ProcessInfo, WaitOutcome, WaitStatus

log = logging.getLogger(__name__)

PATH_SEPARATORS = ("\\", "/")


#* --- psutil seams ---
def get_process_from_pid(pid: int) -> psutil.Process:
    """A wrapper for psutil.Process for easy testing/mocking if needed."""
    return psutil.Process(pid)

def list_pids() -> List[int]:
    """A wrapper for psutil.pids for easy testing/mocking if needed."""
    return psutil.pids()


#* --- Path Helpers ---
def _last_separator_index(path: str) -> int:
    return max(path.rfind(sep) for sep in PATH_SEPARATORS)

def get_name_from_path(path: str) -> str:
    """Returns the final segment of a path, or the whole path if it has no separator."""
    index = _last_separator_index(path)
    return path[index + 1:] if index >= 0 else path

def get_directory_from_path(path: str) -> str:
    """Returns everything before the last separator, or the whole path if it has none."""
    index = _last_separator_index(path)
    return path[:index] if index >= 0 else path


#* --- Process Metadata ---
def get_process_info(pid: int) -> Optional[ProcessInfo]:
    """
    Resolves a pid to the path and name of its executable.

    A process that has exited or cannot be opened yields None. A process that
    can be opened but whose image path cannot be read is still reported, with
    the path set to `UNKNOWN_PROCESS_PATH`.

    :param pid: The process identifier to resolve.
    :return: A ProcessInfo snapshot, or None if the process is not usable.
    """
    try:
        proc = get_process_from_pid(pid)
    except (psutil.Error, ValueError) as e:
        log.debug(f"Could not open process {pid} for querying: {e}")
        return None

    try:
        path = proc.exe()
    except (psutil.Error, OSError) as e:
        log.debug(f"Could not query image path of process {pid}: {e}")
        path = ""

    if not path:
        path = config.UNKNOWN_PROCESS_PATH

    return ProcessInfo(name=get_name_from_path(path), path=path)


#* --- Successor Search ---
def find_process_in_directory(target_directory: str, capacity: Optional[int] = None) -> Optional[int]:
    """
    Returns the first live process whose executable lies under a directory.

    Only the first `capacity` entries of the process table are considered,
    and pid 0 is always skipped. The comparison is a case-insensitive prefix
    match. When several processes match, the one that comes first in the OS
    enumeration order wins, which is not guaranteed to be stable.

    :param target_directory: The directory prefix to match executable paths against.
    :param capacity: Number of process table entries to scan, defaults to `PROCESS_ENUM_CAPACITY`.
    :return: The matching pid, or None if no process matches.
    """
    if capacity is None:
        capacity = config.PROCESS_ENUM_CAPACITY

    try:
        pids = list_pids()
    except (psutil.Error, OSError) as e:
        log.error(f"Failed to enumerate processes: {e}")
        return None

    if len(pids) > capacity:
        log.debug(f"Process table has {len(pids)} entries, only the first {capacity} are scanned.")

    lowercase_target = target_directory.casefold()
    for pid in pids[:capacity]:
        if pid == 0:
            continue

        process_info = get_process_info(pid)
        if process_info is None:
            continue

        if process_info.path.casefold().startswith(lowercase_target):
            return pid

    return None

# Public name used when looking for a process outside a supervision session.
find_successor = find_process_in_directory



#* --- Termination Wait ---
def _os_error_code(error: BaseException) -> Optional[int]:
    return getattr(error, "winerror", None) or getattr(error, "errno", None)

def open_for_wait(pid: int) -> Optional[psutil.Process]:
    """
    Opens a process so that its termination can be waited on.

    :param pid: The process identifier to open.
    :return: The process, or None if it has exited or cannot be opened.
    """
    try:
        return get_process_from_pid(pid)
    except (psutil.Error, ValueError) as e:
        log.debug(f"Could not open process {pid} for monitoring: {e}")
        return None

def wait_for_exit(proc: psutil.Process) -> WaitOutcome:
    """
    Blocks until an opened process terminates.

    The wait has no timeout. All failures are converted into a WaitOutcome.

    :param proc: A process returned by `open_for_wait`.
    :return: The outcome of the wait.
    """
    try:
        exit_code = proc.wait()
    except psutil.TimeoutExpired as e:
        return WaitOutcome(WaitStatus.UNEXPECTED, detail=str(e))
    except psutil.NoSuchProcess:
        # Gone between the open and the wait.
        return WaitOutcome(WaitStatus.TERMINATED)
    except psutil.AccessDenied as e:
        # psutil requests the synchronization right inside wait().
        return WaitOutcome(WaitStatus.OPEN_FAILED, detail=str(e))
    except (psutil.Error, OSError) as e:
        return WaitOutcome(WaitStatus.WAIT_FAILED, error_code=_os_error_code(e), detail=str(e))

    return WaitOutcome(WaitStatus.TERMINATED, exit_code=exit_code)
