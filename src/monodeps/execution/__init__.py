"""Command execution in package directories."""

from monodeps.execution.results import ExecutionResult, ExecutionStatus
from monodeps.execution.runner import run_attached, run_command, run_in_package

__all__ = [
    "ExecutionResult",
    "ExecutionStatus",
    "run_attached",
    "run_command",
    "run_in_package",
]
