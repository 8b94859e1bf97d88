"""
Dispatch a pid to the port discovery strategy of the host operating system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .config import ResolverSettings
from .darwin import resolve_darwin
from .errors import PortLookupError
from .linux import resolve_linux
from .platforms import PlatformKind, detect_platform
from .ports import validate_pid
from .windows import resolve_windows

Strategy = Callable[[int, ResolverSettings], Optional[List[str]]]


def _windows_strategy(pid: int, settings: ResolverSettings) -> Optional[List[str]]:
    return resolve_windows(pid, executable=settings.powershell, timeout=settings.timeout)


def _darwin_strategy(pid: int, settings: ResolverSettings) -> Optional[List[str]]:
    return resolve_darwin(pid, executable=settings.lsof, strict=settings.strict, timeout=settings.timeout)


def _linux_strategy(pid: int, settings: ResolverSettings) -> Optional[List[str]]:
    return resolve_linux(pid, proc_root=settings.proc_root)


DEFAULT_STRATEGIES: Dict[PlatformKind, Strategy] = {
    PlatformKind.WINDOWS: _windows_strategy,
    PlatformKind.DARWIN: _darwin_strategy,
    PlatformKind.LINUX: _linux_strategy,
}


@dataclass
class LookupResult:
    pid: int
    platform: Optional[str] = None
    ports: Optional[List[str]] = None
    error: str = ""
    error_kind: Optional[str] = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return not self.error

    @property
    def found(self) -> bool:
        return bool(self.ports)

    def to_dict(self) -> Dict:
        return {
            "pid": self.pid,
            "platform": self.platform,
            "ports": self.ports,
            "error": self.error or None,
            "error_kind": self.error_kind,
            "checked_at": self.checked_at.isoformat(),
        }


class PortResolver:
    """
    Resolve the TCP ports a process has bound or connected.

    ``resolve`` returns a sorted list of decimal port strings, or ``None`` when
    the process owns no TCP sockets. Every call is independent; nothing is
    cached, so one resolver can be shared across threads.
    """

    def __init__(
        self,
        settings: Optional[ResolverSettings] = None,
        strategies: Optional[Dict[PlatformKind, Strategy]] = None,
    ):
        self.settings = settings or ResolverSettings()
        self.strategies = dict(DEFAULT_STRATEGIES)
        if strategies:
            self.strategies.update(strategies)

    def platform(self) -> PlatformKind:
        return detect_platform(self.settings.platform)

    def resolve(self, pid: int) -> Optional[List[str]]:
        pid = validate_pid(pid)
        kind = self.platform()
        return self.strategies[kind](pid, self.settings)

    def lookup(self, pid: int) -> LookupResult:
        """
        Like ``resolve`` but folds lookup failures into the result. An invalid
        pid is still raised.
        """
        pid = validate_pid(pid)
        result = LookupResult(pid=pid)
        try:
            kind = self.platform()
            result.platform = kind.value
            result.ports = self.strategies[kind](pid, self.settings)
        except PortLookupError as exc:
            result.error = str(exc)
            result.error_kind = type(exc).__name__
        return result


def find_ports_by_pid(pid: int, settings: Optional[ResolverSettings] = None) -> Optional[List[str]]:
    return PortResolver(settings).resolve(pid)


resolve = find_ports_by_pid
