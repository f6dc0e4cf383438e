"""Tests for per-OS shell and archive tool selection."""
from pathlib import Path

from devprep.core.detector import SystemDetector
from devprep.core.strategies import (
    BASH_SHELL,
    CMD_SHELL,
    PowerShellArchiveTool,
    ZipArchiveTool,
    select_archive_tool,
    select_shell,
)


def test_shell_selection_per_os():
    assert select_shell("Windows") == CMD_SHELL
    assert select_shell("Linux") == BASH_SHELL
    assert select_shell("Darwin") == BASH_SHELL
    assert CMD_SHELL.argv("echo hi") == ["cmd", "/C", "echo hi"]


def test_archive_tool_selection_per_os():
    assert isinstance(select_archive_tool("Windows"), PowerShellArchiveTool)
    assert isinstance(select_archive_tool("Linux"), ZipArchiveTool)


def test_zip_tool_commands():
    tool = ZipArchiveTool()
    assert tool.extract_command(Path("a.zip"), Path("out")) == ["unzip", "a.zip", "-d", "out"]
    assert tool.compress_command(Path("dist")) == ["zip", "-r", "dist.zip", "dist"]


def test_powershell_tool_commands():
    tool = PowerShellArchiveTool()
    assert tool.extract_command(Path("a.zip"), Path("out")) == [
        "powershell", "Expand-Archive", "a.zip", "out",
    ]
    assert tool.compress_command(Path("dist")) == [
        "powershell", "Compress-Archive", "dist", "dist.zip",
    ]


def test_system_info_exposes_strategies(system_info, windows_info):
    assert system_info.shell() == BASH_SHELL
    assert windows_info.shell() == CMD_SHELL
    assert isinstance(windows_info.archive_tool(), PowerShellArchiveTool)


def test_detect_system_reports_cpu_count():
    info = SystemDetector().detect_system()
    assert info.cpu_count >= 1
    assert info.os_type


def test_check_required_tools_reports_missing(monkeypatch):
    detector = SystemDetector()
    monkeypatch.setattr(detector, "_is_tool_available", lambda tool: tool != "pkg-config")
    missing = detector.check_required_tools(detector.required_tools("linux"), os_type="Linux")
    assert [tool.name for tool in missing] == ["pkg-config"]
    assert "apt-get install pkg-config" in missing[0].suggestion
