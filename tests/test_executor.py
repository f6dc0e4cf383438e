"""Tests for the command runner."""
import sys
from unittest.mock import MagicMock, patch

import pytest

from devprep.core.errors import IOFailure, ProcessFailure, SpawnFailure
from devprep.core.executor import CommandResult, CommandRunner, date_utc_yyyymmdd


def _popen(returncode=0, stderr=b""):
    process = MagicMock(returncode=returncode)
    process.communicate.return_value = (None, stderr)
    return process


def test_run_direct_success_discards_stderr(runner, tmp_path):
    """A zero exit is a success and carries no diagnostic text."""
    result = runner.run_direct(
        sys.executable,
        ["-c", "import sys; sys.stderr.write('just a warning')"],
        workdir=tmp_path,
    )
    assert isinstance(result, CommandResult)
    assert result.success is True
    assert result.return_code == 0
    assert result.stderr == ""
    assert result.check() is result


def test_run_direct_failure_keeps_stderr_verbatim(runner, tmp_path):
    """A non-zero exit keeps stderr byte for byte, including CR and unicode."""
    message = "boom\r\n  second line ✗\n"
    script = (
        "import sys; "
        f"sys.stderr.buffer.write({message.encode('utf-8')!r}); "
        "sys.exit(3)"
    )
    result = runner.run_direct(sys.executable, ["-c", script], workdir=tmp_path)

    assert result.success is False
    assert result.return_code == 3
    assert result.stderr == message

    with pytest.raises(ProcessFailure) as exc_info:
        result.check()
    assert message in str(exc_info.value)
    assert sys.executable in str(exc_info.value)
    assert exc_info.value.return_code == 3


def test_run_direct_missing_executable_is_spawn_failure(runner):
    with pytest.raises(SpawnFailure) as exc_info:
        runner.run_direct("devprep-no-such-tool-xyz", ["--help"])
    assert "devprep-no-such-tool-xyz --help" in str(exc_info.value)


def test_missing_workdir_is_io_failure(runner, tmp_path):
    with patch("devprep.core.executor.subprocess.Popen") as m_popen:
        with pytest.raises(IOFailure):
            runner.run_via_shell(tmp_path / "missing", "bash", "-c", "true")
    m_popen.assert_not_called()


def test_run_via_shell_passes_flag_and_text(runner, tmp_path):
    """The shell gets exactly [shell, flag, text] and runs in workdir."""
    with patch("devprep.core.executor.subprocess.Popen") as m_popen:
        m_popen.return_value = _popen()
        result = runner.run_via_shell(tmp_path, "bash", "-c", "make -j$(nproc)")

    argv = m_popen.call_args.args[0]
    assert argv == ["bash", "-c", "make -j$(nproc)"]
    assert m_popen.call_args.kwargs["cwd"] == tmp_path
    assert result.command == "make -j$(nproc)"
    assert result.success is True


def test_run_in_uses_cmd_on_windows(windows_info, mock_logger, tmp_path):
    runner = CommandRunner(windows_info, mock_logger)
    with patch("devprep.core.executor.subprocess.Popen") as m_popen:
        m_popen.return_value = _popen()
        runner.run_in(tmp_path, "dir")
    assert m_popen.call_args.args[0] == ["cmd", "/C", "dir"]


def test_run_as_bash_in_ignores_host_shell(windows_info, mock_logger, tmp_path):
    runner = CommandRunner(windows_info, mock_logger)
    with patch("devprep.core.executor.subprocess.Popen") as m_popen:
        m_popen.return_value = _popen()
        runner.run_as_bash_in(tmp_path, "./configure")
    assert m_popen.call_args.args[0] == ["bash", "-c", "./configure"]


def test_run_uses_current_directory(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with patch("devprep.core.executor.subprocess.Popen") as m_popen:
        m_popen.return_value = _popen(returncode=1, stderr=b"cargo: not found")
        result = runner.run("cargo install cargo-apk")
    assert m_popen.call_args.kwargs["cwd"] == tmp_path.resolve()
    assert result.success is False
    assert result.stderr == "cargo: not found"


def test_capture_returns_stdout(runner):
    with patch("devprep.core.executor.subprocess.run") as m_run:
        m_run.return_value = MagicMock(returncode=0, stdout=b"-I/usr/local/cuda/include \n", stderr=b"")
        output = runner.capture("pkg-config", ["--cflags-only-I", "cuda"])
    assert output == "-I/usr/local/cuda/include \n"
    assert m_run.call_args.args[0] == ["pkg-config", "--cflags-only-I", "cuda"]


def test_capture_failure_raises(runner):
    with patch("devprep.core.executor.subprocess.run") as m_run:
        m_run.return_value = MagicMock(returncode=1, stdout=b"", stderr=b"Package cuda was not found")
        with pytest.raises(ProcessFailure, match="Package cuda was not found"):
            runner.capture("pkg-config", ["--cflags-only-I", "cuda"])


def test_date_utc_posix(runner):
    with patch.object(runner, "capture", return_value="2024.05.01\n") as m_capture:
        assert date_utc_yyyymmdd(runner) == "2024.05.01"
    m_capture.assert_called_once_with("date", ["-u", "+%Y.%m.%d"])


def test_date_utc_windows(windows_info, mock_logger):
    runner = CommandRunner(windows_info, mock_logger)
    with patch.object(runner, "capture", return_value="2024.05.01\r\n") as m_capture:
        assert date_utc_yyyymmdd(runner) == "2024.05.01"
    assert m_capture.call_args.args[0] == "powershell"
