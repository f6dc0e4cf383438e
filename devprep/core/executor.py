"""
Command execution engine.

Commands stream their standard output straight to the console while standard
error is buffered in memory and only surfaced when the command fails.
"""

import subprocess
import time
from pathlib import Path
from typing import List, Optional, Sequence, Type, Union

from loguru import logger
from pydantic import BaseModel

from devprep.core.detector import SystemInfo
from devprep.core.errors import IOFailure, ProcessFailure, SpawnFailure
from devprep.core.strategies import BASH_SHELL, ShellStrategy

PathLike = Union[str, Path]


class CommandResult(BaseModel):
    """Result of a command execution."""

    command: str
    return_code: int
    stderr: str
    duration: float
    success: bool

    def check(self, error_cls: Type[ProcessFailure] = ProcessFailure) -> "CommandResult":
        """Raise ``error_cls`` if the command failed, otherwise return self."""
        if not self.success:
            raise error_cls(self.command, self.return_code, self.stderr)
        return self


class CommandRunner:
    """Run external commands, either through a shell or directly."""

    def __init__(self, system_info: SystemInfo, app_logger=logger):
        self.system_info = system_info
        self.logger = app_logger

    @property
    def shell(self) -> ShellStrategy:
        return self.system_info.shell()

    def run_via_shell(
        self,
        workdir: PathLike,
        shell: str,
        shell_flag: str,
        command_text: str,
    ) -> CommandResult:
        """
        Run ``command_text`` through ``shell shell_flag command_text`` in ``workdir``.

        Args:
            workdir: Existing directory to run in
            shell: Shell executable, e.g. 'bash' or 'cmd'
            shell_flag: Flag telling the shell to run one command string
            command_text: Command line handed to the shell unchanged

        Returns:
            CommandResult object

        Raises:
            IOFailure: workdir does not exist
            SpawnFailure: the shell could not be started
        """
        return self._spawn([shell, shell_flag, command_text], workdir, command_text)

    def run_in(self, workdir: PathLike, command_text: str) -> CommandResult:
        """Run a shell command with the shell native to this system."""
        shell = self.shell
        return self.run_via_shell(workdir, shell.name, shell.flag, command_text)

    def run(self, command_text: str) -> CommandResult:
        """Run a shell command in the current directory."""
        return self.run_in(Path.cwd(), command_text)

    def run_as_bash_in(self, workdir: PathLike, command_text: str) -> CommandResult:
        """Run a command with bash regardless of host OS (WSL provides bash on Windows)."""
        return self.run_via_shell(workdir, BASH_SHELL.name, BASH_SHELL.flag, command_text)

    def run_direct(
        self,
        executable: str,
        args: Sequence[str] = (),
        workdir: Optional[PathLike] = None,
    ) -> CommandResult:
        """Spawn ``executable`` with ``args`` without any shell parsing."""
        argv = [executable, *[str(arg) for arg in args]]
        return self._spawn(argv, workdir, " ".join(argv))

    def capture(self, executable: str, args: Sequence[str] = ()) -> str:
        """
        Run a short query command and return its standard output.

        Raises:
            SpawnFailure: the executable could not be started
            ProcessFailure: the command exited non-zero
        """
        argv = [executable, *[str(arg) for arg in args]]
        cmd_str = " ".join(argv)
        self.logger.debug(f"Querying: {cmd_str}")

        try:
            result = subprocess.run(argv, capture_output=True)
        except OSError as e:
            raise SpawnFailure(cmd_str, str(e)) from e

        if result.returncode != 0:
            raise ProcessFailure(cmd_str, result.returncode, _decode(result.stderr))
        return _decode(result.stdout)

    def _spawn(
        self,
        argv: List[str],
        workdir: Optional[PathLike],
        display: str,
    ) -> CommandResult:
        cwd = Path(workdir) if workdir is not None else Path.cwd()
        if not cwd.is_dir():
            raise IOFailure("use working directory", cwd, "directory does not exist")

        self.logger.info(f"[devprep - {cwd.name or cwd}] > {display}")
        start_time = time.time()

        try:
            # stdout is inherited so output shows up live
            process = subprocess.Popen(argv, cwd=cwd, stderr=subprocess.PIPE)
        except OSError as e:
            self.logger.error(f"Could not start {argv[0]}: {e}")
            raise SpawnFailure(display, str(e)) from e

        _, raw_stderr = process.communicate()
        duration = time.time() - start_time
        stderr = _decode(raw_stderr)
        success = process.returncode == 0

        if success:
            if stderr:
                self.logger.debug(f"stderr of successful command: {stderr.strip()}")
            stderr = ""
            self.logger.debug(f"Command completed in {duration:.2f}s: {display}")
        else:
            self.logger.error(
                f"Command failed (return code: {process.returncode}): {display}"
            )

        return CommandResult(
            command=display,
            return_code=process.returncode,
            stderr=stderr,
            duration=duration,
            success=success,
        )


def _decode(raw: Optional[bytes]) -> str:
    if not raw:
        return ""
    return raw.decode("utf-8", errors="replace")


def date_utc_yyyymmdd(runner: CommandRunner) -> str:
    """Current UTC date as ``YYYY.MM.DD``, asked from the host's own date tool."""
    if runner.system_info.is_windows:
        output = runner.capture(
            "powershell",
            ['(Get-Date).ToUniversalTime().ToString("yyyy.MM.dd")'],
        )
    else:
        output = runner.capture("date", ["-u", "+%Y.%m.%d"])

    return output.replace("\r", "").replace("\n", "")
