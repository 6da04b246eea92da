"""Value types shared by the launcher and the supervisor."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


@dataclass(frozen=True)
class ProcessInfo:
    """A snapshot of a process's executable, not a live handle."""
    name: str
    path: str


#* --- Supervision State ---
class StateKind(Enum):
    MONITORING = "monitoring"
    SEARCHING_SUCCESSOR = "searching_successor"
    STOPPED = "stopped"


@dataclass(frozen=True)
class SupervisionState:
    kind: StateKind
    pid: Optional[int] = None

    @classmethod
    def monitoring(cls, pid: int) -> "SupervisionState":
        return cls(StateKind.MONITORING, pid)

    @classmethod
    def searching(cls) -> "SupervisionState":
        return cls(StateKind.SEARCHING_SUCCESSOR)

    @classmethod
    def stopped(cls) -> "SupervisionState":
        return cls(StateKind.STOPPED)

    def __str__(self) -> str:
        if self.kind is StateKind.MONITORING:
            return f"Monitoring({self.pid})"
        if self.kind is StateKind.SEARCHING_SUCCESSOR:
            return "SearchingSuccessor"
        return "Stopped"


class SupervisionOutcome(Enum):
    """How a call to `supervise` ended."""
    STOPPED = "stopped"                  # successor search exhausted
    UNSUPERVISABLE = "unsupervisable"    # launched, but no pid to watch
    LAUNCH_FAILED = "launch_failed"
    UNRESOLVED = "unresolved"            # launched pid could not be resolved
    INTERRUPTED = "interrupted"


#* --- Wait Outcomes ---
class WaitStatus(Enum):
    OPEN_FAILED = "open_failed"
    TERMINATED = "terminated"
    WAIT_FAILED = "wait_failed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class WaitOutcome:
    """The result of opening a process for synchronization and waiting on it."""
    status: WaitStatus
    exit_code: Optional[int] = None
    error_code: Optional[int] = None
    detail: str = ""


#* --- Launch Results ---
@dataclass(frozen=True)
class FullySupervisable:
    """The activation service started the app and reported its pid."""
    pid: int


@dataclass(frozen=True)
class LaunchedUnsupervisable:
    """The shell fallback started the app; no pid is known."""
    primary_error: str = ""


@dataclass(frozen=True)
class Failed:
    """Both launch mechanisms failed."""
    reasons: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return "; ".join(self.reasons)


LaunchResult = Union[FullySupervisable, LaunchedUnsupervisable, Failed]


class LaunchError(Exception):
    """Raised by a single launch mechanism; the launcher turns it into a LaunchResult."""
