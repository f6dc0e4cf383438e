"""
Error taxonomy for provisioning runs.

Every failure raised here is fatal for the recipe that hit it. The message
always carries the command line or path involved so the step can be re-run
by hand.
"""

from pathlib import Path
from typing import Optional, Union


class ProvisionError(Exception):
    """Base class for all provisioning failures."""


class ProcessFailure(ProvisionError):
    """A command ran and exited with a non-zero status."""

    def __init__(self, command: str, return_code: int, stderr: str = ""):
        self.command = command
        self.return_code = return_code
        self.stderr = stderr
        message = f"Command failed (exit {return_code}): {command}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class NetworkFailure(ProcessFailure):
    """The HTTP transfer tool reported a non-zero exit status."""


class SpawnFailure(ProvisionError):
    """The executable could not be started at all."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Could not start command: {command}\n{reason}")


class IOFailure(ProvisionError):
    """A filesystem operation that the recipe depends on failed."""

    def __init__(
        self,
        operation: str,
        path: Union[str, Path],
        reason: Optional[str] = None,
    ):
        self.operation = operation
        self.path = Path(path)
        self.reason = reason
        message = f"Failed to {operation}: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
