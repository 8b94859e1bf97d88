from __future__ import annotations

import pytest

from portfinder import linux
from portfinder.errors import AccessDenied, ProcessNotFound


def test_parse_tcp_table_decodes_hex_ports(proc_tree):
    text = "header\n" + proc_tree.row("0100007F:1F90", "111") + proc_tree.row("0100007F:0016", "222", index=1)
    assert linux.parse_tcp_table(text) == [("111", "8080"), ("222", "22")]


def test_parse_tcp_table_skips_header_blank_and_short_rows(proc_tree):
    text = (
        proc_tree.row("0100007F:1F90", "111")  # treated as the header line
        + "\n"
        + "   1: 0100007F:0050 00000000:0000 0A\n"
        + proc_tree.row("0100007F:ZZZZ", "333")
        + proc_tree.row("00000000:01BB", "444")
    )
    assert linux.parse_tcp_table(text) == [("444", "443")]


def test_parse_tcp_table_handles_ipv6_addresses(proc_tree):
    text = "header\n" + proc_tree.row("00000000000000000000000001000000:1F90", "555")
    assert linux.parse_tcp_table(text) == [("555", "8080")]


def test_collect_socket_inodes_keeps_only_sockets(proc_tree):
    proc_tree.add_process(
        42,
        ["socket:[1001]", "/dev/null", "pipe:[77]", "socket:[1002]", "anon_inode:[eventpoll]", "socket:[1001]"],
    )
    assert linux.collect_socket_inodes(42, proc_tree.root) == {"1001", "1002"}


def test_collect_socket_inodes_skips_unreadable_descriptors(proc_tree, monkeypatch):
    fd_dir = proc_tree.add_process(42, ["socket:[1001]", "socket:[1002]"])
    real_readlink = linux.os.readlink

    def flaky_readlink(path, *args, **kwargs):
        if str(path) == str(fd_dir / "0"):
            raise FileNotFoundError("closed while listing")
        return real_readlink(path, *args, **kwargs)

    monkeypatch.setattr(linux.os, "readlink", flaky_readlink)
    assert linux.collect_socket_inodes(42, proc_tree.root) == {"1002"}


def test_collect_socket_inodes_missing_process(proc_tree):
    with pytest.raises(ProcessNotFound) as excinfo:
        linux.collect_socket_inodes(999, proc_tree.root)
    assert excinfo.value.pid == 999
    assert "999" in str(excinfo.value)


def test_collect_socket_inodes_permission_denied(proc_tree, monkeypatch):
    proc_tree.add_process(42, ["socket:[1001]"])

    def denied(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(linux.os, "listdir", denied)
    with pytest.raises(AccessDenied):
        linux.collect_socket_inodes(42, proc_tree.root)


def test_resolve_returns_only_matching_rows(proc_tree):
    proc_tree.add_process(42, ["socket:[1001]", "socket:[1002]", "socket:[1003]"])
    proc_tree.write_table(
        "tcp",
        [
            proc_tree.row("0100007F:1F90", "1001"),
            proc_tree.row("00000000:0016", "1002", index=1),
            proc_tree.row("00000000:0050", "9001", index=2),
            proc_tree.row("00000000:01BB", "9002", index=3),
        ],
    )
    proc_tree.write_table(
        "tcp6",
        [
            proc_tree.row("00000000000000000000000000000000:0BB8", "1003"),
            proc_tree.row("00000000000000000000000000000000:0CEA", "9003", index=1),
        ],
    )
    assert sorted(linux.resolve_linux(42, proc_tree.root), key=int) == ["22", "3000", "8080"]


def test_resolve_deduplicates_repeated_ports(proc_tree):
    proc_tree.add_process(42, ["socket:[1001]", "socket:[1002]"])
    proc_tree.write_table(
        "tcp",
        [proc_tree.row("0100007F:1F90", "1001"), proc_tree.row("0100007F:1F90", "1001", index=1)],
    )
    proc_tree.write_table("tcp6", [proc_tree.row("00000000000000000000000000000000:1F90", "1002")])
    assert linux.resolve_linux(42, proc_tree.root) == ["8080"]


def test_resolve_without_ipv6_table(proc_tree):
    proc_tree.add_process(42, ["socket:[1001]"])
    proc_tree.write_table("tcp", [proc_tree.row("0100007F:0016", "1001")])
    proc_tree.write_table("tcp6", None)
    assert linux.read_tcp_table(proc_tree.root / "net" / "tcp6") == []
    assert linux.resolve_linux(42, proc_tree.root) == ["22"]


def test_resolve_process_without_sockets_is_empty(proc_tree):
    proc_tree.add_process(42, ["/dev/null", "pipe:[5]"])
    proc_tree.write_table("tcp", [proc_tree.row("0100007F:0016", "1001")])
    assert linux.resolve_linux(42, proc_tree.root) is None


def test_resolve_sockets_without_tcp_rows_is_empty(proc_tree):
    proc_tree.add_process(42, ["socket:[1001]"])
    proc_tree.write_table("tcp", [proc_tree.row("0100007F:0016", "2002")])
    assert linux.resolve_linux(42, proc_tree.root) is None
