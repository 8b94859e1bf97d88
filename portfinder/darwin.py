"""
macOS port discovery by scanning ``lsof`` network file output.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .errors import PlatformQueryFailed
from .ports import dedupe_preserve, finalize_ports, is_port_text

DEFAULT_LSOF = "lsof"


@dataclass
class LsofOutput:
    command: Sequence[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def build_lsof_command(executable: str = DEFAULT_LSOF) -> List[str]:
    return [executable, "-i", "-P", "-n"]


def run_lsof(executable: str = DEFAULT_LSOF, timeout: Optional[float] = None) -> LsofOutput:
    """
    Run lsof across all processes and keep its exit status and error stream,
    so callers can tell "nothing matched" apart from a real failure.
    """
    command = build_lsof_command(executable)
    try:
        result = subprocess.run(command, capture_output=True, text=True, check=False, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise PlatformQueryFailed("lsof timed out", f"after {exc.timeout}s") from exc
    except OSError as exc:
        return LsofOutput(command=command, returncode=127, stderr=str(exc))
    return LsofOutput(
        command=command,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=(result.stderr or "").strip(),
    )


def filter_pid_lines(output: str, pid: int) -> List[str]:
    # Whole-token match only: pid 12 must not pick up pid 123's lines.
    needle = str(pid)
    return [line for line in output.splitlines() if needle in line.split()]


def extract_ports(lines: Iterable[str]) -> List[str]:
    ports: List[str] = []
    for line in lines:
        for part in line.split():
            if ":" not in part:
                continue
            # IPv6 hosts contain colons too; the port is after the last one.
            maybe_port = part.rsplit(":", 1)[1]
            if is_port_text(maybe_port):
                ports.append(maybe_port)
    return dedupe_preserve(ports)


def resolve_darwin(
    pid: int,
    executable: str = DEFAULT_LSOF,
    strict: bool = False,
    timeout: Optional[float] = None,
) -> Optional[List[str]]:
    output = run_lsof(executable, timeout=timeout)
    lines = filter_pid_lines(output.stdout, pid)
    if not output.success and not lines:
        # lsof exits non-zero both on errors and when it finds nothing.
        if strict and output.stderr:
            raise PlatformQueryFailed(f"lsof exited with status {output.returncode}", output.stderr)
        return None
    return finalize_ports(extract_ports(lines))
