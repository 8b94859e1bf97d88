"""
Host operating system detection used to pick a port discovery strategy.
"""

from __future__ import annotations

import platform
from enum import Enum
from typing import Optional

from .errors import UnsupportedPlatform


class PlatformKind(str, Enum):
    WINDOWS = "windows"
    DARWIN = "darwin"
    LINUX = "linux"


_ALIASES = {
    "windows": PlatformKind.WINDOWS,
    "win32": PlatformKind.WINDOWS,
    "cygwin": PlatformKind.WINDOWS,
    "darwin": PlatformKind.DARWIN,
    "macos": PlatformKind.DARWIN,
    "linux": PlatformKind.LINUX,
}


def detect_platform(system: Optional[str] = None) -> PlatformKind:
    """
    Map a system name (``platform.system()`` when omitted) to a PlatformKind.
    """
    name = system if system is not None else platform.system()
    kind = _ALIASES.get((name or "").strip().lower())
    if kind is None:
        raise UnsupportedPlatform(name or "unknown")
    return kind
