"""
Core functionality components.
"""

from devprep.core.config import AppConfig, DownloadUrls, PinnedVersions
from devprep.core.detector import SystemDetector, SystemInfo
from devprep.core.errors import (
    IOFailure,
    NetworkFailure,
    ProcessFailure,
    ProvisionError,
    SpawnFailure,
)
from devprep.core.executor import CommandResult, CommandRunner, date_utc_yyyymmdd
from devprep.core.strategies import ShellStrategy, select_archive_tool, select_shell

__all__ = [
    "AppConfig",
    "DownloadUrls",
    "PinnedVersions",
    "SystemDetector",
    "SystemInfo",
    "IOFailure",
    "NetworkFailure",
    "ProcessFailure",
    "ProvisionError",
    "SpawnFailure",
    "CommandResult",
    "CommandRunner",
    "date_utc_yyyymmdd",
    "ShellStrategy",
    "select_archive_tool",
    "select_shell",
]
