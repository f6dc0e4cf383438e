"""
Per-platform dependency recipes.

Each recipe materializes pinned third-party libraries under the dependency
root:

    deps/
      x264.pc
      windows/x264, windows/ffmpeg
      linux/ffmpeg
      android/oculus_openxr/<abi>/libopenxr_loader.so
"""

from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from devprep.core.config import AppConfig
from devprep.core.errors import ProvisionError
from devprep.core.executor import CommandResult, CommandRunner
from devprep.core.strategies import BASH_SHELL
from devprep.provision.ffmpeg import compose_configure_command, probe_pkg_config
from devprep.provision.pkgconfig import PackageConfigDescriptor
from devprep.provision.steps import (
    ON_WINDOWS,
    CopyFileStep,
    DirectCommandStep,
    FetchExtractStep,
    Gate,
    ProvisionContext,
    ProvisionRecipe,
    RecipeReport,
    RemoveTreeStep,
    RenameStep,
    SetEnvStep,
    ShellCommandStep,
    StepOutcome,
    WriteFileStep,
    flag_unset,
)
from devprep.transfer.archive import ArchiveTransfer

WINDOWS_PACKAGES = "llvm vulkan-sdk wixtoolset pkgconfiglite"
ANDROID_HOST_PACKAGES = "llvm"
OPENXR_LOADER = "libopenxr_loader.so"

RUST_ANDROID_TARGETS = {
    "arm64-v8a": "aarch64-linux-android",
    "armeabi-v7a": "armv7-linux-androideabi",
    "x86_64": "x86_64-linux-android",
    "x86": "i686-linux-android",
}


def choco_install_args(packages: str) -> List[str]:
    """PowerShell arguments for an elevated ``choco install``."""
    return [
        "Start-Process",
        "choco",
        "-ArgumentList",
        f'"install {packages} -y"',
        "-Verb",
        "runAs",
    ]


def choco_install(runner: CommandRunner, packages: str) -> CommandResult:
    """Install Chocolatey packages with administrator rights (UAC prompt)."""
    return runner.run_direct("powershell", choco_install_args(packages))


def choco_install_step(packages: str, when: Optional[Gate] = None) -> DirectCommandStep:
    return DirectCommandStep(
        executable="powershell",
        args=choco_install_args(packages),
        label=f"Install {packages} with Chocolatey (elevated)",
        when=when,
    )


def windows_recipe(config: AppConfig) -> ProvisionRecipe:
    """Prebuilt x264 and FFmpeg for Windows, plus the x264 pkg-config entry."""
    windows_dir = config.deps_dir / "windows"
    x264_dir = windows_dir / "x264"
    ffmpeg_staging = windows_dir / "ffmpeg_download"
    descriptor = PackageConfigDescriptor.for_prefix("x264", config.versions.x264, x264_dir)

    return ProvisionRecipe(
        name="windows",
        description="Windows: toolchain packages, x264 and FFmpeg binaries",
        steps=[
            choco_install_step(WINDOWS_PACKAGES, when=flag_unset("skip_admin_priv")),
            FetchExtractStep(config.x264_url(), x264_dir),
            WriteFileStep(config.deps_dir / "x264.pc", descriptor.render()),
            SetEnvStep("PKG_CONFIG_PATH", str(config.deps_dir)),
            FetchExtractStep(config.ffmpeg_windows_url(), ffmpeg_staging),
            RenameStep(
                ffmpeg_staging / config.versions.ffmpeg_windows_build,
                windows_dir / "ffmpeg",
                replace=True,
            ),
            RemoveTreeStep(ffmpeg_staging),
        ],
    )


def linux_configure_command(ctx: ProvisionContext) -> str:
    """Configure line for the current flags; probes CUDA only when needed."""
    hardware_encode = ctx.flag("hardware_encode")
    cuda = probe_pkg_config(ctx.runner, "cuda") if hardware_encode else None
    return compose_configure_command(hardware_encode, cuda, ctx.config.versions.cuda_arch)


def linux_make_command(ctx: ProvisionContext) -> str:
    return f"make -j{ctx.runner.system_info.cpu_count}"


def linux_recipe(config: AppConfig) -> ProvisionRecipe:
    """FFmpeg built from source with VAAPI, and optionally NVENC."""
    linux_dir = config.deps_dir / "linux"
    ffmpeg_dir = linux_dir / "ffmpeg"
    version = config.versions.ffmpeg_source

    return ProvisionRecipe(
        name="linux",
        description="Linux: FFmpeg source build",
        steps=[
            FetchExtractStep(config.ffmpeg_source_url(), linux_dir),
            RenameStep(linux_dir / f"FFmpeg-{version}", ffmpeg_dir),
            ShellCommandStep(
                linux_configure_command,
                workdir=ffmpeg_dir,
                shell=BASH_SHELL,
                label="Configure FFmpeg",
            ),
            ShellCommandStep(
                linux_make_command,
                workdir=ffmpeg_dir,
                shell=BASH_SHELL,
                label="Build FFmpeg (make, one job per CPU core)",
            ),
        ],
    )


def android_recipe(config: AppConfig) -> ProvisionRecipe:
    """Rust Android target, cargo-apk and the OpenXR mobile loader."""
    abi = config.android_abi
    if abi not in RUST_ANDROID_TARGETS:
        raise ProvisionError(f"Unsupported Android ABI: {abi}")

    sdk_dir = config.temp_sdk_dir
    loader = sdk_dir / "OpenXR" / "Libs" / "Android" / abi / "Release" / OPENXR_LOADER
    destination = config.deps_dir / "android" / "oculus_openxr" / abi / OPENXR_LOADER

    return ProvisionRecipe(
        name="android",
        description="Android: cross toolchain and OpenXR loader",
        steps=[
            choco_install_step(
                ANDROID_HOST_PACKAGES,
                when=ON_WINDOWS & flag_unset("skip_admin_priv"),
            ),
            ShellCommandStep(f"rustup target add {RUST_ANDROID_TARGETS[abi]}"),
            ShellCommandStep("cargo install cargo-apk"),
            FetchExtractStep(config.openxr_loader_url(), sdk_dir),
            CopyFileStep(loader, destination),
            RemoveTreeStep(sdk_dir),
        ],
    )


RECIPES: Dict[str, Callable[[AppConfig], ProvisionRecipe]] = {
    "windows": windows_recipe,
    "linux": linux_recipe,
    "android": android_recipe,
}

RECIPE_FLAGS: Dict[str, Tuple[str, ...]] = {
    "windows": ("skip_admin_priv",),
    "linux": ("hardware_encode",),
    "android": ("skip_admin_priv",),
}


class DependencyProvisioner:
    """Select a recipe and run it against the configured dependency root."""

    def __init__(
        self,
        config: AppConfig,
        runner: CommandRunner,
        transfer: Optional[ArchiveTransfer] = None,
        app_logger=logger,
    ):
        self.config = config
        self.runner = runner
        self.transfer = transfer or ArchiveTransfer(
            runner,
            config.temp_archive_path,
            proxy=config.proxy,
            app_logger=app_logger,
        )
        self.logger = app_logger

    @staticmethod
    def default_recipe_name(os_type: str) -> str:
        """Desktop recipe matching the host; android is never a default."""
        return "windows" if os_type == "Windows" else "linux"

    def recipe(self, name: str) -> ProvisionRecipe:
        if name not in RECIPES:
            raise ProvisionError(
                f"Unknown recipe '{name}'. Available: {', '.join(RECIPES)}"
            )
        return RECIPES[name](self.config)

    def context(self, name: str, **flags: bool) -> ProvisionContext:
        unknown = set(flags) - set(RECIPE_FLAGS.get(name, ()))
        if unknown:
            raise ProvisionError(
                f"Recipe '{name}' does not accept: {', '.join(sorted(unknown))}"
            )
        return ProvisionContext(
            config=self.config,
            runner=self.runner,
            transfer=self.transfer,
            flags=dict(flags),
        )

    def plan(self, name: str, **flags: bool) -> List[StepOutcome]:
        recipe = self.recipe(name)
        return recipe.plan(self.context(name, **flags))

    def run(self, name: str, **flags: bool) -> RecipeReport:
        recipe = self.recipe(name)
        ctx = self.context(name, **flags)
        return recipe.run(ctx, app_logger=self.logger)

    def prepare_windows_deps(self, skip_admin_priv: bool = False) -> RecipeReport:
        return self.run("windows", skip_admin_priv=skip_admin_priv)

    def build_ffmpeg_linux(self, hardware_encode: bool = False) -> RecipeReport:
        return self.run("linux", hardware_encode=hardware_encode)

    def build_android_deps(self, skip_admin_priv: bool = False) -> RecipeReport:
        return self.run("android", skip_admin_priv=skip_admin_priv)
