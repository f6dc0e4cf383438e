"""
System and tool detection.
"""

import os
import platform
import shutil
import socket
import sys
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from devprep.core.strategies import (
    ArchiveToolStrategy,
    ShellStrategy,
    select_archive_tool,
    select_shell,
)


class SystemInfo(BaseModel):
    """System information model."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    os_type: str  # 'Linux', 'Darwin', 'Windows'
    platform: str
    python_version: str
    hostname: str
    cpu_count: int = 1

    @property
    def is_windows(self) -> bool:
        return self.os_type == "Windows"

    def shell(self) -> ShellStrategy:
        """Shell strategy for this system."""
        return select_shell(self.os_type)

    def archive_tool(self) -> ArchiveToolStrategy:
        """Archive tool strategy for this system."""
        return select_archive_tool(self.os_type)


class MissingTool(BaseModel):
    """Information about a missing tool."""
    
    name: str
    suggestion: str


class SystemDetector:
    """Detect system information and tool availability."""
    
    def detect_system(self) -> SystemInfo:
        """Detect current system information."""
        return SystemInfo(
            os_type=platform.system(),
            platform=platform.platform(),
            python_version=sys.version.split()[0],
            hostname=socket.gethostname(),
            cpu_count=os.cpu_count() or 1,
        )
    
    def check_required_tools(
        self,
        tools: List[str],
        os_type: Optional[str] = None,
    ) -> List[MissingTool]:
        """Check if required tools are available."""
        missing = []
        os_type = os_type or platform.system()
        
        for tool in tools:
            # Map tool names to OS-specific equivalents
            actual_tool = self._get_tool_name(tool, os_type)
            
            if not self._is_tool_available(actual_tool):
                missing.append(MissingTool(
                    name=tool,
                    suggestion=self._get_installation_suggestion(tool, os_type)
                ))
        
        return missing

    def required_tools(self, recipe_name: str) -> List[str]:
        """External tools a recipe needs on the host."""
        common = ["curl", "unzip"]
        if recipe_name == "windows":
            return common + ["powershell", "setx"]
        if recipe_name == "linux":
            return common + ["bash", "pkg-config", "make"]
        if recipe_name == "android":
            return common + ["rustup", "cargo"]
        return common
    
    def _get_tool_name(self, tool: str, os_type: str) -> str:
        """Get OS-specific tool name."""
        mappings = {
            "unzip": {
                "Windows": "powershell",
                "Darwin": "unzip",
                "Linux": "unzip",
            },
            "zip": {
                "Windows": "powershell",
                "Darwin": "zip",
                "Linux": "zip",
            },
        }
        
        if tool in mappings and os_type in mappings[tool]:
            return mappings[tool][os_type]
        
        return tool
    
    def _is_tool_available(self, tool: str) -> bool:
        """Check if a tool is available in PATH."""
        return shutil.which(tool) is not None
    
    def _get_installation_suggestion(self, tool: str, os_type: str) -> str:
        """Get installation suggestion for a missing tool."""
        suggestions = {
            "Linux": {
                "curl": "sudo apt-get install curl (or yum install curl)",
                "unzip": "sudo apt-get install unzip (or yum install unzip)",
                "zip": "sudo apt-get install zip (or yum install zip)",
                "bash": "Usually pre-installed",
                "pkg-config": "sudo apt-get install pkg-config (or yum install pkgconfig)",
                "make": "sudo apt-get install build-essential (or yum groupinstall 'Development Tools')",
                "rustup": "curl https://sh.rustup.rs -sSf | sh",
                "cargo": "Installed together with rustup",
            },
            "Darwin": {
                "curl": "Pre-installed",
                "unzip": "Pre-installed",
                "zip": "Pre-installed",
                "bash": "Pre-installed",
                "pkg-config": "brew install pkg-config",
                "make": "xcode-select --install",
                "rustup": "brew install rustup-init && rustup-init",
                "cargo": "Installed together with rustup",
            },
            "Windows": {
                "curl": "Pre-installed on Windows 10 1803 and later",
                "powershell": "Pre-installed",
                "setx": "Pre-installed",
                "choco": "See https://chocolatey.org/install",
                "rustup": "Download rustup-init.exe from https://rustup.rs",
                "cargo": "Installed together with rustup",
            },
        }
        
        if os_type in suggestions and tool in suggestions[os_type]:
            return suggestions[os_type][tool]
        
        return f"Please install {tool} manually"
