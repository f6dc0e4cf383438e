"""
Download and archive handling.
"""

from devprep.transfer.archive import ArchiveTransfer

__all__ = [
    "ArchiveTransfer",
]
