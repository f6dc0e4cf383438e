"""
OS-specific shell and archive tool selection.

Both strategies are plain data describing which external program to call, so
every OS branch can be exercised from a single host.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol


@dataclass(frozen=True)
class ShellStrategy:
    """Shell executable plus the flag that makes it run one command string."""

    name: str
    flag: str

    def argv(self, command_text: str) -> List[str]:
        return [self.name, self.flag, command_text]


CMD_SHELL = ShellStrategy(name="cmd", flag="/C")
BASH_SHELL = ShellStrategy(name="bash", flag="-c")


class ArchiveToolStrategy(Protocol):
    """Builds argument lists for the external archive tool."""

    def extract_command(self, archive: Path, destination: Path) -> List[str]:
        ...

    def compress_command(self, source: Path) -> List[str]:
        ...


class PowerShellArchiveTool:
    """Expand-Archive / Compress-Archive through PowerShell."""

    def extract_command(self, archive: Path, destination: Path) -> List[str]:
        return ["powershell", "Expand-Archive", str(archive), str(destination)]

    def compress_command(self, source: Path) -> List[str]:
        return ["powershell", "Compress-Archive", str(source), f"{source}.zip"]


class ZipArchiveTool:
    """Info-ZIP command line tools (unzip / zip)."""

    def extract_command(self, archive: Path, destination: Path) -> List[str]:
        return ["unzip", str(archive), "-d", str(destination)]

    def compress_command(self, source: Path) -> List[str]:
        return ["zip", "-r", f"{source}.zip", str(source)]


def select_shell(os_type: str) -> ShellStrategy:
    """Shell used for plain shell commands on the given OS ('Windows', 'Linux', 'Darwin')."""
    if os_type == "Windows":
        return CMD_SHELL
    return BASH_SHELL


def select_archive_tool(os_type: str) -> ArchiveToolStrategy:
    """Archive tool for the given OS."""
    if os_type == "Windows":
        return PowerShellArchiveTool()
    return ZipArchiveTool()
