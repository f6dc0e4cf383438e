"""
Data access layer for the dashboard.

The dashboard reads and changes settings through four operations. The backend
may live in the same process (before a server is reachable) or behind a
transport (once connected to the server); the dashboard does not care which.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

from loguru import logger
from pydantic import BaseModel

PathSegment = Union[str, int]
Transport = Callable[[str, Dict[str, Any]], Any]


class AudioDevicesList(BaseModel):
    """Audio devices available to the backend."""

    output: List[str] = []
    input: List[str] = []


class DashboardDataInterface(Protocol):
    def set_single_value(self, key_path: Sequence[PathSegment], value: str) -> None:
        ...

    def execute_script(self, code: str) -> Optional[str]:
        ...

    def get_gpu_names(self) -> List[str]:
        ...

    def get_audio_devices_list(self) -> AudioDevicesList:
        ...


@dataclass
class CallbackDataInterface:
    """Forwards every call to a callable installed by the backend."""

    set_session_cb: Callable[[List[PathSegment], str], None]
    execute_script_cb: Callable[[str], Optional[str]]
    get_gpu_names_cb: Callable[[], List[str]]
    get_audio_devices_list_cb: Callable[[], AudioDevicesList]

    def set_single_value(self, key_path: Sequence[PathSegment], value: str) -> None:
        self.set_session_cb(list(key_path), value)

    def execute_script(self, code: str) -> Optional[str]:
        return self.execute_script_cb(code)

    def get_gpu_names(self) -> List[str]:
        return self.get_gpu_names_cb()

    def get_audio_devices_list(self) -> AudioDevicesList:
        return self.get_audio_devices_list_cb()


@dataclass
class LocalDataInterface:
    """
    In-process backend that edits a session dictionary directly.

    ``value`` is stored as given; interpreting it is up to whoever reads the
    session. Intermediate containers must already exist.
    """

    session: Dict[str, Any] = field(default_factory=dict)
    gpu_names: List[str] = field(default_factory=list)
    audio_devices: AudioDevicesList = field(default_factory=AudioDevicesList)
    script_handler: Optional[Callable[[str], Optional[str]]] = None

    def set_single_value(self, key_path: Sequence[PathSegment], value: str) -> None:
        if not key_path:
            raise ValueError("key_path must not be empty")

        node: Any = self.session
        for segment in key_path[:-1]:
            node = node[segment]
        node[key_path[-1]] = value
        logger.debug(f"Session value set: {'.'.join(str(s) for s in key_path)}")

    def execute_script(self, code: str) -> Optional[str]:
        if self.script_handler is None:
            return None
        return self.script_handler(code)

    def get_gpu_names(self) -> List[str]:
        return list(self.gpu_names)

    def get_audio_devices_list(self) -> AudioDevicesList:
        return self.audio_devices


class RemoteDataInterface:
    """Backend reached through a request/response transport."""

    def __init__(self, transport: Transport):
        """
        Args:
            transport: ``transport(method, payload)`` sends one request and
                returns the decoded response
        """
        self.transport = transport

    def set_single_value(self, key_path: Sequence[PathSegment], value: str) -> None:
        self.transport("set_single_value", {"path": list(key_path), "value": value})

    def execute_script(self, code: str) -> Optional[str]:
        response = self.transport("execute_script", {"code": code})
        return None if response is None else str(response)

    def get_gpu_names(self) -> List[str]:
        return [str(name) for name in self.transport("get_gpu_names", {}) or []]

    def get_audio_devices_list(self) -> AudioDevicesList:
        return AudioDevicesList.model_validate(self.transport("get_audio_devices_list", {}))
