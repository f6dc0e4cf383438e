"""Version information for devprep."""

__version__ = "0.3.0"
__version_info__ = (0, 3, 0)

# Release information
__license__ = "MIT"
__description__ = "Fetch, unpack and configure native dependencies before a build"
