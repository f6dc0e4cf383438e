"""
Configuration management.

Pinned versions, download URLs and the optional proxy live here instead of in
the recipes so that networks without the default topology can still run them.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE_NAME = ".devprep.yaml"


class PinnedVersions(BaseModel):
    """Pinned versions of every third-party dependency."""

    x264: str = "0.164"
    x264_revision: int = 3086
    ffmpeg_windows_build: str = "ffmpeg-n5.0-latest-win64-gpl-shared-5.0"
    ffmpeg_source: str = "n4.4"
    openxr_loader: str = "1.0.18"
    # nvcc from CUDA 11 cannot target below compute_52
    cuda_arch: int = 52


class DownloadUrls(BaseModel):
    """Download URL templates; placeholders are filled from PinnedVersions."""

    x264: str = (
        "https://github.com/ShiftMediaProject/x264/releases/download/"
        "{version}.r{revision}/libx264_{version}.r{revision}_msvc16.zip"
    )
    ffmpeg_windows: str = (
        "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest/{build}.zip"
    )
    ffmpeg_source: str = "https://codeload.github.com/FFmpeg/FFmpeg/zip/{version}"
    # OpenXR Mobile SDK, no versioned URL available
    openxr_loader: str = "https://securecdn.oculus.com/binaries/download/?id=4421717764533443"


def load_config_file() -> dict[str, Any]:
    """
    Load optional config from ~/.devprep.yaml or ./.devprep.yaml.
    Returns only the recognised keys so callers can apply their own defaults.
    """
    candidates = [
        Path.home() / CONFIG_FILE_NAME,
        Path.cwd() / CONFIG_FILE_NAME,
    ]
    raw: dict[str, Any] = {}
    for path in candidates:
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            break

    known = set(AppConfig.model_fields)
    return {key: value for key, value in raw.items() if key in known}


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DEVPREP_",
        env_nested_delimiter="__",
        arbitrary_types_allowed=True,
    )

    output_dir: Path = Field(default=Path("output"))
    verbose: bool = False
    deps_dir: Path = Field(default=Path("deps"))
    build_dir: Path = Field(default=Path("build"))
    proxy: Optional[str] = None
    android_abi: str = "arm64-v8a"
    versions: PinnedVersions = Field(default_factory=PinnedVersions)
    urls: DownloadUrls = Field(default_factory=DownloadUrls)

    @field_validator("output_dir", "deps_dir", "build_dir", mode="before")
    @classmethod
    def validate_dir(cls, v, info):
        """Validate and convert directories to Path."""
        if v is None:
            return cls.model_fields[info.field_name].default
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        raise ValueError(f"{info.field_name} must be a path")

    @field_validator("proxy", mode="before")
    @classmethod
    def validate_proxy(cls, v):
        """Treat an empty proxy string as no proxy."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def model_post_init(self, __context):
        """Resolve directories and make sure the log directory exists."""
        self.output_dir = self.output_dir.resolve()
        self.deps_dir = self.deps_dir.resolve()
        self.build_dir = self.build_dir.resolve()
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def temp_archive_path(self) -> Path:
        """Scratch file every download lands in before extraction."""
        return self.build_dir / "temp_download.zip"

    @property
    def temp_sdk_dir(self) -> Path:
        return self.build_dir / "temp_download"

    def x264_url(self) -> str:
        return self.urls.x264.format(
            version=self.versions.x264,
            revision=self.versions.x264_revision,
        )

    def ffmpeg_windows_url(self) -> str:
        return self.urls.ffmpeg_windows.format(build=self.versions.ffmpeg_windows_build)

    def ffmpeg_source_url(self) -> str:
        return self.urls.ffmpeg_source.format(version=self.versions.ffmpeg_source)

    def openxr_loader_url(self) -> str:
        return self.urls.openxr_loader.format(version=self.versions.openxr_loader)
