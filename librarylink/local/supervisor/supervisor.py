import logging
from typing import Any, Callable, List, Optional
from librarylink.log import get_report_logger
from librarylink.local.config import effective_settings as config
from librarylink.local.supervisor import launcher, process_utils
from librarylink.local.supervisor.models import (
    Failed, FullySupervisable, ProcessInfo, StateKind, SupervisionOutcome,
    SupervisionState, WaitOutcome, WaitStatus,
)

log = logging.getLogger(__name__)
report = get_report_logger("supervisor")

Resolver = Callable[[int], Optional[ProcessInfo]]
Locator = Callable[[str], Optional[int]]
Opener = Callable[[int], Optional[Any]]
Waiter = Callable[[Any], WaitOutcome]


class ProcessSupervisor:
    """
    Watches one process at a time and hops to a successor when it goes away.

    The target directory is taken from the first process handed to `run` and
    stays fixed for the whole session. Each time the watched process terminates
    or cannot be observed, the process table is searched for another process
    whose executable lives under that directory. The session ends only when
    that search comes back empty.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        locator: Optional[Locator] = None,
        opener: Optional[Opener] = None,
        waiter: Optional[Waiter] = None,
    ) -> None:
        """
        Initializes the supervisor state.

        :param resolver: Maps a pid to its ProcessInfo, defaults to `process_utils.get_process_info`.
        :param locator: Finds a pid under a directory, defaults to `process_utils.find_process_in_directory`.
        :param opener: Opens a pid for waiting and returns None on failure, defaults to `process_utils.open_for_wait`.
        :param waiter: Blocks until an opened process terminates, defaults to `process_utils.wait_for_exit`.
        """
        self.resolve = resolver or process_utils.get_process_info
        self.locate = locator or process_utils.find_process_in_directory
        self.open = opener or process_utils.open_for_wait
        self.wait = waiter or process_utils.wait_for_exit

        self.target_directory: Optional[str] = None
        self.state: Optional[SupervisionState] = None
        self.history: List[SupervisionState] = []

    def _enter(self, new_state: SupervisionState) -> None:
        """Records a state transition."""
        log.debug(f"Supervision state: {self.state} -> {new_state}")
        self.state = new_state
        self.history.append(new_state)

    def _report_process(self, info: ProcessInfo) -> None:
        report.info(f"   Process Name: {info.name}")
        report.info(f"   Process Path: {info.path}")

    #* --- State Handlers ---
    def _monitor(self, pid: int) -> None:
        """Runs one open-and-wait step for the watched process."""
        handle = self.open(pid)
        if handle is None:
            report.info(f"Failed to open process {pid} for monitoring")
            self._enter(SupervisionState.searching())
            return

        report.info(f"Waiting for process {pid} to terminate...")
        outcome = self.wait(handle)

        if outcome.status is WaitStatus.OPEN_FAILED:
            report.info(f"Failed to open process {pid} for monitoring")
            log.debug(f"Open failure detail for process {pid}: {outcome.detail}")
        elif outcome.status is WaitStatus.TERMINATED:
            report.info(f"Process {pid} has terminated")
            if outcome.exit_code is not None:
                log.debug(f"Process {pid} exit code: {outcome.exit_code}")
        elif outcome.status is WaitStatus.WAIT_FAILED:
            report.info(f"Waiting on process {pid} failed. Error: {outcome.error_code} ({outcome.detail})")
        else:
            log.warning(f"Unexpected wait result for process {pid}: {outcome.detail}. Continuing monitoring...")
            return

        self._enter(SupervisionState.searching())

    def _search(self) -> None:
        """Looks for a successor process under the target directory."""
        report.info(f"Searching for replacement process in directory: {self.target_directory}")
        new_pid = self.locate(self.target_directory)

        if new_pid is None:
            report.info("No replacement process found in target directory")
            report.info("Exiting monitoring...")
            self._enter(SupervisionState.stopped())
            return

        report.info(f"Found replacement process: {new_pid}")
        info = self.resolve(new_pid)
        if info is not None:
            self._report_process(info)
        self._enter(SupervisionState.monitoring(new_pid))
        report.info(f"Now monitoring process {new_pid}")
        report.info("")

    #* --- Session ---
    def run(self, pid: int) -> SupervisionOutcome:
        """
        Supervises a launched process until no successor can be found.

        :param pid: The pid of the process reported by the launcher.
        :return: STOPPED when the successor search is exhausted, UNRESOLVED if the
                 first process could not be resolved, INTERRUPTED on Ctrl+C.
        """
        info = self.resolve(pid)
        if info is None:
            report.info("Could not get process information for monitoring")
            return SupervisionOutcome.UNRESOLVED

        report.info("Launched Process Details:")
        report.info(f"   Process Path: {info.path}")
        report.info("")

        self.target_directory = process_utils.get_directory_from_path(info.path)
        if info.path == config.UNKNOWN_PROCESS_PATH:
            log.warning(f"Image path of process {pid} is unknown, successor search will not be scoped to an install directory.")

        report.info("Starting process monitoring...")
        report.info(f"   Monitoring directory: {self.target_directory}")
        report.info(f"   Initial process ID: {pid}")
        report.info("")
        self._enter(SupervisionState.monitoring(pid))

        try:
            while self.state.kind is not StateKind.STOPPED:
                if self.state.kind is StateKind.MONITORING:
                    self._monitor(self.state.pid)
                else:
                    self._search()
        except KeyboardInterrupt:
            log.info("Supervision interrupted by user.")
            return SupervisionOutcome.INTERRUPTED

        return SupervisionOutcome.STOPPED


def supervise(app_id: str, supervisor: Optional[ProcessSupervisor] = None) -> SupervisionOutcome:
    """
    Launches an application and supervises it and its successors.

    :param app_id: The Application User Model ID to launch.
    :param supervisor: The supervisor to run, a new one is created if omitted.
    :return: How the session ended.
    """
    result = launcher.launch_app(app_id)

    if isinstance(result, Failed):
        log.error(f"Could not launch '{app_id}': {result}")
        return SupervisionOutcome.LAUNCH_FAILED
    if not isinstance(result, FullySupervisable):
        log.info(f"'{app_id}' was launched without a process ID, supervision is not possible.")
        return SupervisionOutcome.UNSUPERVISABLE

    report.info("")
    supervisor = supervisor or ProcessSupervisor()
    return supervisor.run(result.pid)
