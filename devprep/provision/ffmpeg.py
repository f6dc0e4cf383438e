"""
FFmpeg configure command composition and the CUDA toolkit probe.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from devprep.core.errors import ProvisionError
from devprep.core.executor import CommandRunner

HW_ENCODERS = ("h264_nvenc", "hevc_nvenc")

# Strip every default component; only what is re-enabled below gets built
BASELINE_FLAGS = [
    "--enable-gpl --enable-version3",
    "--disable-static --enable-shared",
    "--disable-programs",
    "--disable-doc",
    "--disable-avdevice --disable-avformat --disable-swresample --disable-postproc",
    "--disable-network",
    "--enable-lto",
    "--disable-everything",
]

VAAPI_AND_SOFTWARE_FLAGS = [
    "--enable-encoder=h264_vaapi --enable-encoder=hevc_vaapi",
    "--enable-encoder=libx264 --enable-encoder=libx264rgb --enable-encoder=libx265",
    "--enable-hwaccel=h264_vaapi --enable-hwaccel=hevc_vaapi",
    "--enable-filter=scale --enable-filter=scale_vaapi",
    "--enable-libx264 --enable-libx265 --enable-vulkan",
    "--enable-libdrm",
]


@dataclass
class PkgConfigProbe:
    """Include and link paths reported by pkg-config for one package."""

    name: str
    include_paths: List[str] = field(default_factory=list)
    link_paths: List[str] = field(default_factory=list)

    def include_flags(self) -> str:
        if not self.include_paths:
            raise ProvisionError(f"pkg-config entry for {self.name} has no include paths")
        return " ".join(f"-I{path}" for path in self.include_paths)

    def link_flags(self) -> str:
        if not self.link_paths:
            raise ProvisionError(f"pkg-config entry for {self.name} has no link paths")
        return " ".join(f"-L{path}" for path in self.link_paths)


def probe_pkg_config(runner: CommandRunner, name: str) -> PkgConfigProbe:
    """Ask pkg-config for the include and link directories of ``name``."""
    cflags = runner.capture("pkg-config", ["--cflags-only-I", name])
    libs = runner.capture("pkg-config", ["--libs-only-L", name])

    return PkgConfigProbe(
        name=name,
        include_paths=[token[2:] for token in cflags.split() if token.startswith("-I")],
        link_paths=[token[2:] for token in libs.split() if token.startswith("-L")],
    )


def nvenc_flags(cuda: PkgConfigProbe, cuda_arch: int) -> str:
    """Flags enabling NVENC encoders; requires the CUDA toolkit probe."""
    arch = f"-gencode arch=compute_{cuda_arch},code=sm_{cuda_arch} -O2"
    return " ".join([
        " ".join(f"--enable-encoder={encoder}" for encoder in HW_ENCODERS),
        "--enable-nonfree",
        "--enable-cuda-nvcc --enable-libnpp",
        f'--nvccflags="{arch}"',
        f'--extra-cflags="{cuda.include_flags()}"',
        f'--extra-ldflags="{cuda.link_flags()}"',
        " ".join(f"--enable-hwaccel={encoder}" for encoder in HW_ENCODERS),
    ])


def compose_configure_command(
    hardware_encode: bool,
    cuda: Optional[PkgConfigProbe] = None,
    cuda_arch: int = 52,
) -> str:
    """
    Build the ``./configure`` line for the Linux FFmpeg build.

    Args:
        hardware_encode: Add NVENC encoders and CUDA toolchain flags
        cuda: Result of probing the CUDA toolkit, required with hardware_encode
        cuda_arch: Compute capability handed to nvcc

    Returns:
        Command line to run from the FFmpeg source directory
    """
    parts = ["./configure", *BASELINE_FLAGS]
    if hardware_encode:
        if cuda is None:
            raise ProvisionError("Hardware encoding requested but CUDA was not probed")
        parts.append(nvenc_flags(cuda, cuda_arch))
    parts.extend(VAAPI_AND_SOFTWARE_FLAGS)
    return " ".join(parts)
