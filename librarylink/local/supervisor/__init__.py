"""
The Supervisor package.
Launches a packaged application and follows its process lifecycle.

This package contains the ProcessSupervisor class and its helper modules,
which together handle activation, process metadata lookup, successor search,
and the termination wait.
"""
from .supervisor import ProcessSupervisor, supervise
from .process_utils import find_successor, get_process_info

__all__ = ['ProcessSupervisor', 'supervise', 'find_successor', 'get_process_info']
