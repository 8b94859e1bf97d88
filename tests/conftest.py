from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import pytest

TCP_HEADER = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt"
    "   uid  timeout inode\n"
)


class ProcTree:
    """Synthetic procfs layout: <root>/<pid>/fd/* symlinks and <root>/net/tcp(6)."""

    def __init__(self, root: Path):
        self.root = root
        (self.root / "net").mkdir(parents=True, exist_ok=True)

    @staticmethod
    def row(local_address: str, inode: str, index: int = 0, remote: str = "00000000:0000") -> str:
        return (
            f"{index:4}: {local_address} {remote} 0A 00000000:00000000 00:00000000 00000000"
            f"  1000        0 {inode} 1 0000000000000000 100 0 0 10 0\n"
        )

    def add_process(self, pid: int, fd_targets: Iterable[str]) -> Path:
        fd_dir = self.root / str(pid) / "fd"
        fd_dir.mkdir(parents=True)
        for fd, target in enumerate(fd_targets):
            os.symlink(target, fd_dir / str(fd))
        return fd_dir

    def write_table(self, name: str, rows: Optional[Iterable[str]]) -> None:
        path = self.root / "net" / name
        if rows is None:
            if path.exists():
                path.unlink()
            return
        path.write_text(TCP_HEADER + "".join(rows), encoding="utf-8")


@pytest.fixture()
def proc_tree(tmp_path: Path) -> ProcTree:
    return ProcTree(tmp_path / "proc")
