"""
Main CLI application using Typer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import questionary
import typer
from rich.console import Console

from devprep.cli.formatters import (
    format_error,
    format_plan,
    format_report,
    print_header,
    print_missing_tools,
    print_system_info,
)
from devprep.core.config import AppConfig, load_config_file
from devprep.core.detector import SystemDetector, SystemInfo
from devprep.core.errors import ProvisionError
from devprep.core.executor import CommandRunner, date_utc_yyyymmdd
from devprep.provision.recipes import RECIPE_FLAGS, RECIPES, DependencyProvisioner
from devprep.storage.logger import setup_logging
from devprep.transfer.archive import ArchiveTransfer

app = typer.Typer(
    name="devprep",
    help="Fetch, unpack and configure native dependencies before a build",
    add_completion=False,
)

console = Console()

OUTPUT_OPTION = typer.Option(None, "--output", "-o", help="Directory for log files")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose output")


def _init_context(
    output_dir: Optional[Path],
    verbose: bool,
    **overrides,
) -> tuple[AppConfig, object, SystemDetector, SystemInfo]:
    """
    Initialize shared objects: config, logger, detector and system info.
    Uses optional config file (~/.devprep.yaml or ./.devprep.yaml) for values the CLI does not set.
    """
    file_cfg = load_config_file()
    if output_dir is not None:
        file_cfg["output_dir"] = output_dir
    if verbose:
        file_cfg["verbose"] = True
    file_cfg.update({key: value for key, value in overrides.items() if value is not None})

    config = AppConfig(**file_cfg)
    logger = setup_logging(config.output_dir, config.verbose)
    detector = SystemDetector()
    system_info = detector.detect_system()

    return config, logger, detector, system_info


def _needs_elevation(recipe_name: str, system_info: SystemInfo) -> bool:
    return recipe_name == "windows" or (recipe_name == "android" and system_info.is_windows)


def _recipe_flags(recipe_name: str, skip_admin_priv: bool, hw_encode: bool) -> dict:
    values = {"skip_admin_priv": skip_admin_priv, "hardware_encode": hw_encode}
    return {name: values[name] for name in RECIPE_FLAGS[recipe_name]}


def _fail(error: ProvisionError, logger) -> None:
    logger.error(str(error))
    format_error(error, console)
    raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def _default(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    devprep - fetch, unpack and configure native dependencies before a build.
    """
    if version:
        from devprep import __version__
        console.print(f"devprep {__version__}")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command("prepare-deps")
def prepare_deps(
    platform_name: Optional[str] = typer.Option(
        None,
        "--platform",
        "-p",
        help="Recipe to run: windows, linux or android (default: host desktop recipe)",
    ),
    skip_admin_priv: bool = typer.Option(
        False,
        "--skip-admin-priv",
        help="Do not run the elevated package manager install",
    ),
    hw_encode: bool = typer.Option(
        False,
        "--hw-encode",
        help="Linux: build FFmpeg with NVENC (needs the CUDA toolkit)",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask before elevated installs"),
    deps_dir: Optional[Path] = typer.Option(None, "--deps-dir", help="Dependency root"),
    proxy: Optional[str] = typer.Option(None, "--proxy", help="Proxy URL for downloads"),
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Download and set up the third-party libraries for one platform.
    """
    config, logger, detector, system_info = _init_context(
        output_dir, verbose, deps_dir=deps_dir, proxy=proxy
    )
    recipe_name = platform_name or DependencyProvisioner.default_recipe_name(system_info.os_type)
    if recipe_name not in RECIPES:
        console.print(f"[red]Unknown platform '{recipe_name}'. Choose from: {', '.join(RECIPES)}[/red]")
        raise typer.Exit(2)

    print_header(console)
    print_system_info(system_info, console)
    print_missing_tools(detector.check_required_tools(detector.required_tools(recipe_name)), console)

    if _needs_elevation(recipe_name, system_info) and not skip_admin_priv and not yes:
        confirmed = questionary.confirm(
            "Install toolchain packages with administrator rights?",
            default=True,
        ).ask()
        if not confirmed:
            logger.warning("Elevated install declined, continuing without it")
            skip_admin_priv = True

    runner = CommandRunner(system_info, logger)
    provisioner = DependencyProvisioner(config, runner, app_logger=logger)
    flags = _recipe_flags(recipe_name, skip_admin_priv, hw_encode)

    console.print(f"\n[bold cyan]Provisioning {recipe_name} dependencies into {config.deps_dir}...[/bold cyan]\n")
    try:
        report = provisioner.run(recipe_name, **flags)
    except ProvisionError as e:
        _fail(e, logger)

    format_report(report, console)


@app.command()
def recipes(
    skip_admin_priv: bool = typer.Option(False, "--skip-admin-priv", help="Plan without elevated installs"),
    hw_encode: bool = typer.Option(False, "--hw-encode", help="Plan the NVENC build"),
    deps_dir: Optional[Path] = typer.Option(None, "--deps-dir", help="Dependency root"),
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    List every recipe and the steps it would run, without running them.
    """
    config, logger, _detector, system_info = _init_context(output_dir, verbose, deps_dir=deps_dir)
    provisioner = DependencyProvisioner(config, CommandRunner(system_info, logger), app_logger=logger)

    for name in RECIPES:
        flags = _recipe_flags(name, skip_admin_priv, hw_encode)
        format_plan(provisioner.recipe(name), provisioner.plan(name, **flags), console)


@app.command()
def download(
    url: str = typer.Argument(..., help="URL to fetch"),
    destination: Path = typer.Argument(..., help="File to write"),
    proxy: Optional[str] = typer.Option(None, "--proxy", help="Proxy URL"),
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Download a single file with curl.
    """
    config, logger, _detector, system_info = _init_context(output_dir, verbose, proxy=proxy)
    transfer = ArchiveTransfer(CommandRunner(system_info, logger), config.temp_archive_path, proxy=config.proxy)
    try:
        transfer.download(url, destination).check()
    except ProvisionError as e:
        _fail(e, logger)
    console.print(f"[green]✓ Saved {destination}[/green]")


@app.command()
def unzip(
    archive: Path = typer.Argument(..., help="Zip archive"),
    destination: Path = typer.Argument(..., help="Directory to extract into"),
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Extract a zip archive with the platform's archive tool.
    """
    config, logger, _detector, system_info = _init_context(output_dir, verbose)
    transfer = ArchiveTransfer(CommandRunner(system_info, logger), config.temp_archive_path)
    try:
        transfer.extract(archive, destination).check()
    except ProvisionError as e:
        _fail(e, logger)
    console.print(f"[green]✓ Extracted into {destination}[/green]")


@app.command("zip")
def zip_cmd(
    source: Path = typer.Argument(..., help="File or directory to compress"),
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Compress a file or directory into <source>.zip.
    """
    config, logger, _detector, system_info = _init_context(output_dir, verbose)
    transfer = ArchiveTransfer(CommandRunner(system_info, logger), config.temp_archive_path)
    try:
        transfer.compress(source).check()
    except ProvisionError as e:
        _fail(e, logger)
    console.print(f"[green]✓ Wrote {source}.zip[/green]")


@app.command()
def date(
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Print the current UTC date as YYYY.MM.DD (used for nightly version tags).
    """
    _config, logger, _detector, system_info = _init_context(output_dir, verbose)
    try:
        console.print(date_utc_yyyymmdd(CommandRunner(system_info, logger)))
    except ProvisionError as e:
        _fail(e, logger)


@app.command("check-tools")
def check_tools(
    platform_name: Optional[str] = typer.Option(None, "--platform", "-p", help="Recipe to check for"),
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Check that the external tools a recipe needs are installed.
    """
    _config, _logger, detector, system_info = _init_context(output_dir, verbose)
    recipe_name = platform_name or DependencyProvisioner.default_recipe_name(system_info.os_type)
    missing = detector.check_required_tools(detector.required_tools(recipe_name))
    print_missing_tools(missing, console)
    if missing:
        raise typer.Exit(1)
