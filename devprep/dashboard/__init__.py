"""
Dashboard data access.
"""

from devprep.dashboard.interface import (
    AudioDevicesList,
    CallbackDataInterface,
    DashboardDataInterface,
    LocalDataInterface,
    PathSegment,
    RemoteDataInterface,
)

__all__ = [
    "AudioDevicesList",
    "CallbackDataInterface",
    "DashboardDataInterface",
    "LocalDataInterface",
    "PathSegment",
    "RemoteDataInterface",
]
