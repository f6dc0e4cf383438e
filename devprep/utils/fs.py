"""
Filesystem helpers for provisioning steps.

Removal of paths that may be absent ignores "not found" only. Every other
failure becomes an IOFailure.
"""

import shutil
from pathlib import Path

from devprep.core.errors import IOFailure


def remove_file_if_present(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise IOFailure("remove file", path, str(e)) from e


def remove_tree_if_present(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise IOFailure("remove directory", path, str(e)) from e


def make_dirs(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure("create directory", path, str(e)) from e


def rename(source: Path, target: Path) -> None:
    try:
        source.rename(target)
    except OSError as e:
        raise IOFailure(f"rename to {target}", source, str(e)) from e


def copy_file(source: Path, target: Path) -> None:
    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise IOFailure(f"copy to {target}", source, str(e)) from e


def write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise IOFailure("write file", path, str(e)) from e
