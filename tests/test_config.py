"""Tests for AppConfig."""
from pathlib import Path

import yaml

from devprep.core.config import AppConfig, load_config_file


def test_app_config_default_dirs(tmp_path, monkeypatch):
    """Without arguments directories default to cwd-relative paths, resolved."""
    monkeypatch.chdir(tmp_path)
    config = AppConfig()
    assert config.output_dir == (tmp_path / "output").resolve()
    assert config.deps_dir == (tmp_path / "deps").resolve()
    assert config.build_dir == (tmp_path / "build").resolve()
    assert config.output_dir.exists()
    assert config.proxy is None


def test_app_config_dirs_from_string(tmp_path):
    """Directories can be passed as strings and are converted to Path."""
    config = AppConfig(output_dir=str(tmp_path / "out"), deps_dir=str(tmp_path / "d"))
    assert config.output_dir == (tmp_path / "out").resolve()
    assert config.deps_dir == (tmp_path / "d").resolve()


def test_scratch_paths_live_in_build_dir(config):
    assert config.temp_archive_path == config.build_dir / "temp_download.zip"
    assert config.temp_sdk_dir == config.build_dir / "temp_download"


def test_urls_are_formatted_from_pinned_versions(config):
    assert config.x264_url() == (
        "https://github.com/ShiftMediaProject/x264/releases/download/"
        "0.164.r3086/libx264_0.164.r3086_msvc16.zip"
    )
    assert config.ffmpeg_source_url() == "https://codeload.github.com/FFmpeg/FFmpeg/zip/n4.4"
    assert config.ffmpeg_windows_url().endswith("/ffmpeg-n5.0-latest-win64-gpl-shared-5.0.zip")


def test_environment_overrides(tmp_path, monkeypatch):
    """DEVPREP_* variables, including nested ones, override defaults."""
    monkeypatch.setenv("DEVPREP_PROXY", "socks5://127.0.0.1:10808")
    monkeypatch.setenv("DEVPREP_VERSIONS__FFMPEG_SOURCE", "n5.1")
    config = AppConfig(output_dir=tmp_path / "out")
    assert config.proxy == "socks5://127.0.0.1:10808"
    assert config.versions.ffmpeg_source == "n5.1"
    assert config.ffmpeg_source_url().endswith("/zip/n5.1")


def test_empty_proxy_means_no_proxy(tmp_path):
    config = AppConfig(output_dir=tmp_path / "out", proxy="  ")
    assert config.proxy is None


def test_load_config_file_from_cwd(tmp_path, monkeypatch):
    """Recognised keys are read from ./.devprep.yaml; unknown keys are dropped."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".devprep.yaml").write_text(
        yaml.safe_dump({"proxy": "http://proxy:3128", "versions": {"cuda_arch": 61}, "bogus": 1})
    )

    result = load_config_file()
    assert result == {"proxy": "http://proxy:3128", "versions": {"cuda_arch": 61}}
    assert AppConfig(output_dir=tmp_path / "out", **result).versions.cuda_arch == 61


def test_load_config_file_no_file(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    assert load_config_file() == {}


def test_setup_logging_writes_transcript(tmp_path):
    from devprep.storage.logger import setup_logging

    log = setup_logging(tmp_path, verbose=True)
    log.info("[devprep - ffmpeg] > make -j8")
    log.error("Command failed (exit 2): make -j8")
    log.remove()

    assert "make -j8" in (tmp_path / "devprep.log").read_text()
    errors = (tmp_path / "devprep_errors.log").read_text()
    assert "Command failed" in errors
    assert "[devprep - ffmpeg]" not in errors
