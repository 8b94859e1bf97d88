"""
Linux port discovery from procfs: socket inodes held by the process joined
against the kernel TCP tables. No subprocess is involved, so this also works
inside containers as long as the right proc tree is visible.
"""

from __future__ import annotations

import errno
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from .errors import AccessDenied, PlatformQueryFailed, ProcessNotFound
from .ports import dedupe_preserve, finalize_ports

DEFAULT_PROC_ROOT = Path("/proc")
TCP_TABLES = ("tcp", "tcp6")
SOCKET_TARGET = re.compile(r"^socket:\[(\d+)\]$")
LOCAL_ADDRESS_FIELD = 1
INODE_FIELD = 9
MIN_FIELDS = 10

PathLike = Union[str, Path]


def collect_socket_inodes(pid: int, proc_root: PathLike = DEFAULT_PROC_ROOT) -> Set[str]:
    """
    Return the inode numbers of every socket descriptor held by ``pid``.

    Descriptors that vanish or cannot be read while we walk the directory are
    skipped. Failing to list the directory itself means the process is gone
    or off limits, and that is raised.
    """
    fd_dir = Path(proc_root) / str(pid) / "fd"
    try:
        entries = os.listdir(fd_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise ProcessNotFound(pid, f"unable to read {fd_dir}: {exc.strerror}") from exc
    except PermissionError as exc:
        raise AccessDenied(pid, f"unable to read {fd_dir}: {exc.strerror}") from exc
    except OSError as exc:
        if exc.errno == errno.ESRCH:
            raise ProcessNotFound(pid, str(exc)) from exc
        raise PlatformQueryFailed(f"Unable to read {fd_dir}", str(exc)) from exc

    inodes: Set[str] = set()
    for entry in entries:
        try:
            target = os.readlink(fd_dir / entry)
        except OSError:
            continue
        match = SOCKET_TARGET.match(target)
        if match:
            inodes.add(match.group(1))
    return inodes


def _decode_port(local_address: str) -> Optional[str]:
    _, sep, port_hex = local_address.partition(":")
    if not sep:
        return None
    try:
        return str(int(port_hex, 16))
    except ValueError:
        return None


def parse_tcp_table(text: str) -> List[Tuple[str, str]]:
    """
    Parse /proc/net/tcp(6) content into ``(inode, port)`` pairs.

    The first line is the column header. ``local_address`` is ``HEXIP:HEXPORT``
    and the port is rendered back as decimal text, e.g. ``0100007F:1F90`` gives
    ``8080``.
    """
    rows: List[Tuple[str, str]] = []
    for line in text.splitlines()[1:]:
        parts = line.split()
        if len(parts) < MIN_FIELDS:
            continue
        port = _decode_port(parts[LOCAL_ADDRESS_FIELD])
        if port is None:
            continue
        rows.append((parts[INODE_FIELD], port))
    return rows


def read_tcp_table(path: PathLike) -> List[Tuple[str, str]]:
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        # Protocol family disabled in this kernel.
        return []
    except OSError as exc:
        raise PlatformQueryFailed(f"Unable to read {path}", str(exc)) from exc
    return parse_tcp_table(content)


def ports_for_inodes(rows: Iterable[Tuple[str, str]], inodes: Set[str]) -> List[str]:
    return dedupe_preserve(port for inode, port in rows if inode in inodes)


def resolve_linux(pid: int, proc_root: PathLike = DEFAULT_PROC_ROOT) -> Optional[List[str]]:
    inodes = collect_socket_inodes(pid, proc_root)
    if not inodes:
        return None
    net_dir = Path(proc_root) / "net"
    ports: List[str] = []
    for table in TCP_TABLES:
        ports.extend(ports_for_inodes(read_tcp_table(net_dir / table), inodes))
    return finalize_ports(ports)
