"""
devprep - dependency provisioning for native builds
"""

from devprep.__version__ import __version__
from devprep.core.config import AppConfig
from devprep.core.detector import SystemDetector
from devprep.core.executor import CommandRunner
from devprep.provision.recipes import DependencyProvisioner
from devprep.transfer.archive import ArchiveTransfer

__all__ = [
    "AppConfig",
    "ArchiveTransfer",
    "CommandRunner",
    "DependencyProvisioner",
    "SystemDetector",
    "__version__",
]
