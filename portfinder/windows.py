"""
Windows port discovery through PowerShell's Get-NetTCPConnection.
"""

from __future__ import annotations

import subprocess
from typing import List, Optional, Sequence

from .errors import PlatformQueryFailed
from .ports import finalize_ports, is_valid_port

DEFAULT_POWERSHELL = "powershell"


def build_powershell_command(pid: int, executable: str = DEFAULT_POWERSHELL) -> List[str]:
    script = (
        "Get-NetTCPConnection"
        f" | Where-Object {{ $_.OwningProcess -eq {pid} }}"
        " | Select-Object -ExpandProperty LocalPort"
    )
    return [executable, "-NoProfile", "-NonInteractive", "-Command", script]


def parse_local_ports(output: str) -> Optional[List[str]]:
    """
    Parse one LocalPort value per line. Blank output means no connections.
    """
    ports: List[str] = []
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if not is_valid_port(line):
            raise PlatformQueryFailed("Unexpected Get-NetTCPConnection output", line)
        ports.append(str(int(line)))
    return finalize_ports(ports)


def run_query(command: Sequence[str], timeout: Optional[float] = None) -> str:
    try:
        result = subprocess.run(
            list(command), capture_output=True, text=True, check=False, timeout=timeout
        )
    except subprocess.TimeoutExpired as exc:
        raise PlatformQueryFailed("PowerShell query timed out", f"after {exc.timeout}s") from exc
    except OSError as exc:
        raise PlatformQueryFailed("Unable to run PowerShell", str(exc)) from exc

    if result.returncode != 0:
        diagnostic = (result.stderr or "").strip() or f"exit status {result.returncode}"
        raise PlatformQueryFailed("PowerShell query failed", diagnostic)
    return result.stdout or ""


def resolve_windows(
    pid: int,
    executable: str = DEFAULT_POWERSHELL,
    timeout: Optional[float] = None,
) -> Optional[List[str]]:
    return parse_local_ports(run_query(build_powershell_command(pid, executable), timeout=timeout))
