"""Shared fixtures."""
from unittest.mock import MagicMock

import pytest
from loguru import logger

from devprep.core.config import AppConfig
from devprep.core.detector import SystemInfo
from devprep.core.executor import CommandRunner


@pytest.fixture(autouse=True)
def _reset_loguru():
    yield
    logger.remove()


@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def system_info():
    return SystemInfo(
        os_type="Linux",
        platform="Linux-6.1-x86_64",
        python_version="3.11.0",
        hostname="testhost",
        cpu_count=8,
    )


@pytest.fixture
def windows_info():
    return SystemInfo(
        os_type="Windows",
        platform="Windows-10",
        python_version="3.11.0",
        hostname="testhost",
        cpu_count=4,
    )


@pytest.fixture
def runner(system_info, mock_logger):
    return CommandRunner(system_info, mock_logger)


@pytest.fixture
def config(tmp_path, monkeypatch):
    for name in ("DEVPREP_PROXY", "DEVPREP_DEPS_DIR", "DEVPREP_BUILD_DIR"):
        monkeypatch.delenv(name, raising=False)
    return AppConfig(
        output_dir=tmp_path / "output",
        deps_dir=tmp_path / "deps",
        build_dir=tmp_path / "build",
    )
