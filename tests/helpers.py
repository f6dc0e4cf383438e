"""Test helpers shared across modules."""
import sys
from pathlib import Path
from typing import List

from devprep.core.executor import CommandResult


class PythonZipTool:
    """Archive tool backed by ``python -m zipfile`` so tests need no unzip binary."""

    def extract_command(self, archive: Path, destination: Path) -> List[str]:
        return [sys.executable, "-m", "zipfile", "-e", str(archive), str(destination)]

    def compress_command(self, source: Path) -> List[str]:
        return [sys.executable, "-m", "zipfile", "-c", f"{source}.zip", str(source)]


def ok_result(command: str = "cmd") -> CommandResult:
    return CommandResult(command=command, return_code=0, stderr="", duration=0.0, success=True)
