"""
Resolve the TCP ports held by a process on Windows, macOS and Linux.
"""

from .errors import (
    AccessDenied,
    InvalidArgument,
    PlatformQueryFailed,
    PortLookupError,
    ProcessNotFound,
    UnsupportedPlatform,
)
from .platforms import PlatformKind
from .resolver import LookupResult, PortResolver, find_ports_by_pid, resolve

__all__ = [
    "AccessDenied",
    "InvalidArgument",
    "LookupResult",
    "PlatformKind",
    "PlatformQueryFailed",
    "PortLookupError",
    "PortResolver",
    "ProcessNotFound",
    "UnsupportedPlatform",
    "find_ports_by_pid",
    "resolve",
]
