"""
Exceptions raised while resolving the ports owned by a process.
"""

from __future__ import annotations

from typing import Optional


class PortLookupError(RuntimeError):
    """Base class for every lookup failure."""


class InvalidArgument(PortLookupError, ValueError):
    """Raised when the pid is not a positive integer."""


class UnsupportedPlatform(PortLookupError):
    def __init__(self, system: str):
        super().__init__(f"Unsupported platform: {system}")
        self.system = system


class PlatformQueryFailed(PortLookupError):
    """Raised when the native query could not be run or returned garbage."""

    def __init__(self, message: str, diagnostic: str = ""):
        text = f"{message}: {diagnostic}" if diagnostic else message
        super().__init__(text)
        self.diagnostic = diagnostic


class ProcessNotFound(PortLookupError):
    def __init__(self, pid: int, detail: Optional[str] = None):
        message = f"Process {pid} not found"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.pid = pid


class AccessDenied(PortLookupError):
    def __init__(self, pid: int, detail: Optional[str] = None):
        message = f"Access denied while inspecting process {pid}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.pid = pid
