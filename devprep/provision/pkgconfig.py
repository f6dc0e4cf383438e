"""
pkg-config descriptor generation.
"""

from pathlib import Path
from typing import Dict

from pydantic import BaseModel


class PackageConfigDescriptor(BaseModel):
    """A ``.pc`` file describing where a prebuilt library lives."""

    name: str
    version: str
    prefix: str
    exec_prefix: str = "${prefix}/bin"
    libdir: str = "${prefix}/lib"
    includedir: str = "${prefix}/include"
    description: str = ""

    @classmethod
    def for_prefix(
        cls,
        name: str,
        version: str,
        prefix: Path,
        arch: str = "x64",
    ) -> "PackageConfigDescriptor":
        """Descriptor for a ShiftMediaProject-style layout (``bin/<arch>``, ``lib/<arch>``)."""
        return cls(
            name=name,
            version=version,
            # pkg-config wants forward slashes on every OS
            prefix=str(prefix).replace("\\", "/"),
            exec_prefix=f"${{prefix}}/bin/{arch}",
            libdir=f"${{prefix}}/lib/{arch}",
            includedir="${prefix}/include",
            description=f"{name} library",
        )

    @property
    def libs(self) -> str:
        return f"-L${{libdir}} -l{self.name}"

    @property
    def cflags(self) -> str:
        return "-I${includedir}"

    def render(self) -> str:
        return (
            f"prefix={self.prefix}\n"
            f"exec_prefix={self.exec_prefix}\n"
            f"libdir={self.libdir}\n"
            f"includedir={self.includedir}\n"
            "\n"
            f"Name: {self.name}\n"
            f"Description: {self.description}\n"
            f"Version: {self.version}\n"
            f"Libs: {self.libs}\n"
            f"Cflags: {self.cflags}\n"
        )


def parse_pc(text: str) -> Dict[str, str]:
    """
    Parse ``.pc`` text into a flat dict of variables and keywords.

    Variables (``key=value``) and keywords (``Key: value``) share one
    namespace; ``${var}`` references are left unexpanded.
    """
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        colon = line.find(":")
        equals = line.find("=")
        if equals != -1 and (colon == -1 or equals < colon):
            key, value = line.split("=", 1)
        elif colon != -1:
            key, value = line.split(":", 1)
        else:
            continue
        fields[key.strip()] = value.strip()
    return fields
