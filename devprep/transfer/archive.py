"""
Download and archive handling built on external tools.
"""

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from devprep.core.errors import IOFailure, NetworkFailure, ProcessFailure
from devprep.core.executor import CommandResult, CommandRunner
from devprep.core.strategies import ArchiveToolStrategy
from devprep.utils.fs import make_dirs, remove_file_if_present, remove_tree_if_present

PathLike = Union[str, Path]


class ArchiveTransfer:
    """Fetch archives over HTTP and unpack them with the platform's archive tool."""

    def __init__(
        self,
        runner: CommandRunner,
        scratch_archive: Path,
        proxy: Optional[str] = None,
        archive_tool: Optional[ArchiveToolStrategy] = None,
        app_logger=logger,
    ):
        """
        Initialize the transfer helper.

        Args:
            runner: CommandRunner used to spawn curl and the archive tool
            scratch_archive: Temporary path downloads are written to
            proxy: Optional proxy URL handed to curl with ``-x``
            archive_tool: Archive tool strategy, defaults to the host's
            app_logger: Logger for progress and error messages
        """
        self.runner = runner
        self.scratch_archive = Path(scratch_archive)
        self.proxy = proxy
        self.archive_tool = archive_tool or runner.system_info.archive_tool()
        self.logger = app_logger

    def download(self, url: str, destination: PathLike) -> CommandResult:
        """Download ``url`` to ``destination`` with curl, following redirects."""
        args = []
        if self.proxy:
            args += ["-x", self.proxy]
        args += ["-L", "--fail", "-o", str(destination), "--url", url]
        return self.runner.run_direct("curl", args)

    def extract(self, archive: PathLike, destination: PathLike) -> CommandResult:
        """
        Unpack ``archive`` into ``destination``.

        A missing archive fails before the archive tool is started, so nothing
        is written under ``destination``.
        """
        archive = Path(archive)
        destination = Path(destination)
        argv = self.archive_tool.extract_command(archive, destination)

        if not archive.is_file():
            self.logger.error(f"Archive not found: {archive}")
            return CommandResult(
                command=" ".join(argv),
                return_code=-1,
                stderr=f"Archive not found: {archive}",
                duration=0.0,
                success=False,
            )

        return self.runner.run_direct(argv[0], argv[1:])

    def compress(self, source: PathLike) -> CommandResult:
        """Zip ``source`` into ``<source>.zip`` next to it."""
        argv = self.archive_tool.compress_command(Path(source))
        return self.runner.run_direct(argv[0], argv[1:])

    def download_and_extract(self, url: str, destination: PathLike) -> None:
        """
        Replace ``destination`` with the contents of the zip at ``url``.

        Stale scratch files and the old destination are removed first, so
        running this twice gives the same tree. Any failure aborts.

        Raises:
            NetworkFailure: the download failed
            ProcessFailure: extraction failed
            IOFailure: a directory could not be created or the scratch
                archive could not be removed afterwards
        """
        destination = Path(destination)
        zip_file = self.scratch_archive

        remove_file_if_present(zip_file)
        make_dirs(zip_file.parent)
        self.download(url, zip_file).check(NetworkFailure)

        remove_tree_if_present(destination)
        make_dirs(destination)
        self.extract(zip_file, destination).check(ProcessFailure)

        # Unlike the pre-clean above, a leftover scratch archive here is fatal
        try:
            zip_file.unlink()
        except OSError as e:
            raise IOFailure("remove scratch archive", zip_file, str(e)) from e

        self.logger.info(f"Extracted {url} into {destination}")
