"""
Logging components.
"""

from devprep.storage.logger import setup_logging

__all__ = [
    "setup_logging",
]
