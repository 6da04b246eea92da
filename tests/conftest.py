"""Shared fixtures: an in-memory process table standing in for psutil."""

from typing import Dict, List, Optional

import psutil
import pytest

from librarylink.local.supervisor import process_utils


class FakeProcess:
    """Minimal stand-in for psutil.Process."""

    def __init__(self, pid: int, exe: str = "", exe_error: Optional[Exception] = None,
                 wait_result: Optional[int] = 0, wait_error: Optional[Exception] = None):
        self.pid = pid
        self._exe = exe
        self._exe_error = exe_error
        self._wait_result = wait_result
        self._wait_error = wait_error
        self.wait_calls = 0

    def exe(self) -> str:
        if self._exe_error is not None:
            raise self._exe_error
        return self._exe

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        self.wait_calls += 1
        if self._wait_error is not None:
            raise self._wait_error
        return self._wait_result


class FakeProcessTable:
    """Ordered pid -> process mapping, with pids that refuse to be opened."""

    def __init__(self):
        self.processes: Dict[int, FakeProcess] = {}
        self.order: List[int] = []
        self.denied: Dict[int, Exception] = {}
        self.enum_error: Optional[Exception] = None

    def add(self, pid: int, exe: str = "", **kwargs) -> FakeProcess:
        proc = FakeProcess(pid, exe, **kwargs)
        self.processes[pid] = proc
        self.order.append(pid)
        return proc

    def deny(self, pid: int, error: Optional[Exception] = None) -> None:
        self.denied[pid] = error or psutil.AccessDenied(pid)
        self.order.append(pid)

    def get(self, pid: int) -> FakeProcess:
        if pid < 0:
            raise ValueError("pid must be a positive integer")
        if pid in self.denied:
            raise self.denied[pid]
        if pid not in self.processes:
            raise psutil.NoSuchProcess(pid)
        return self.processes[pid]

    def pids(self) -> List[int]:
        if self.enum_error is not None:
            raise self.enum_error
        return list(self.order)


@pytest.fixture
def process_table(monkeypatch) -> FakeProcessTable:
    """Routes process_utils' psutil seams to an in-memory table."""
    table = FakeProcessTable()
    monkeypatch.setattr(process_utils, "get_process_from_pid", table.get)
    monkeypatch.setattr(process_utils, "list_pids", table.pids)
    return table
