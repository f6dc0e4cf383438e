"""
Utility functions.
"""

from devprep.utils.fs import (
    copy_file,
    make_dirs,
    remove_file_if_present,
    remove_tree_if_present,
    rename,
    write_text,
)

__all__ = [
    "copy_file",
    "make_dirs",
    "remove_file_if_present",
    "remove_tree_if_present",
    "rename",
    "write_text",
]
