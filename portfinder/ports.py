"""
Validation and deduplication helpers shared by every platform strategy.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .errors import InvalidArgument

MIN_PORT = 0
MAX_PORT = 65535
_DIGITS = re.compile(r"[0-9]+")


def validate_pid(pid) -> int:
    # bool is an int subclass; True is not a process id.
    if isinstance(pid, bool) or not isinstance(pid, int) or pid <= 0:
        raise InvalidArgument(f"Invalid PID: {pid!r}")
    return pid


def is_port_text(value: str) -> bool:
    return bool(_DIGITS.fullmatch(value))


def is_valid_port(value: str) -> bool:
    return is_port_text(value) and MIN_PORT <= int(value) <= MAX_PORT


def dedupe_preserve(sequence: Iterable[str]) -> List[str]:
    seen = set()
    items = []
    for item in sequence:
        if item not in seen:
            seen.add(item)
            items.append(item)
    return items


def finalize_ports(ports: Iterable[str]) -> Optional[List[str]]:
    """
    Deduplicate and sort port strings numerically. Returns None when nothing
    is left, which is the "no ports found" marker used throughout the package.
    """
    unique = dedupe_preserve(ports)
    if not unique:
        return None
    return sorted(unique, key=int)
