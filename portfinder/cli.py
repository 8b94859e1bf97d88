"""
Command-line interface for the port finder package.
"""

from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional, Sequence

from . import config as config_module
from . import reporting
from .config import ConfigLoadError, ResolverSettings
from .errors import InvalidArgument
from .exporters import load_exporters
from .ports import is_port_text, validate_pid
from .resolver import LookupResult, PortResolver


def parse_pid(value: str) -> int:
    try:
        if not is_port_text(value):
            raise ValueError(value)
        return validate_pid(int(value))
    except (ValueError, InvalidArgument):
        raise argparse.ArgumentTypeError(f"PID must be a positive integer, got {value!r}.")


def build_parser() -> argparse.ArgumentParser:
    parser_obj = argparse.ArgumentParser(
        description="Show which TCP ports a process currently has open."
    )
    parser_obj.add_argument(
        "pids",
        nargs="+",
        type=parse_pid,
        metavar="PID",
        help="Process id(s) to inspect. Each pid is looked up and reported separately.",
    )
    parser_obj.add_argument("--config", help="Load defaults from a JSON configuration file.")
    parser_obj.add_argument(
        "--proc-root",
        help="procfs mount to read on Linux (default: /proc, e.g. /host/proc in a container).",
    )
    parser_obj.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="On macOS, report lsof failures instead of treating them as 'no ports' (--no-strict overrides config).",
    )
    parser_obj.add_argument(
        "--timeout",
        type=float,
        help="Abort the native query after this many seconds (default: wait indefinitely).",
    )
    parser_obj.add_argument(
        "--output-json",
        help="Write the structured results to PATH as JSON.",
    )
    parser_obj.add_argument(
        "--exporters",
        nargs="+",
        help="Emit results via exporters (built-ins: stdout, jsonl).",
    )
    parser_obj.add_argument(
        "--exporter-config",
        help="JSON file mapping exporter names to options (e.g., output paths).",
    )
    parser_obj.add_argument(
        "--quiet",
        action="store_true",
        help="Only print the ports, one pid per line.",
    )
    return parser_obj


def _load_settings(args: argparse.Namespace, parser_obj: argparse.ArgumentParser) -> ResolverSettings:
    try:
        settings = config_module.load_settings(args.config)
    except ConfigLoadError as exc:
        parser_obj.error(str(exc))
    if args.timeout is not None and args.timeout <= 0:
        parser_obj.error("--timeout must be positive.")
    return settings.with_overrides(
        proc_root=args.proc_root,
        strict=args.strict,
        timeout=args.timeout,
    )


def _load_exporter_options(path: Optional[str], parser_obj: argparse.ArgumentParser) -> Dict[str, Dict]:
    if not path:
        return {}
    try:
        data = config_module.load_config(path)
    except ConfigLoadError as exc:
        parser_obj.error(str(exc))
    return {str(key): value for key, value in data.items() if isinstance(value, dict)}


def _render_quiet(result: LookupResult) -> str:
    if result.error:
        return f"{result.pid}: error: {result.error}"
    return f"{result.pid}: {' '.join(result.ports or []) or '-'}"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser_obj = build_parser()
    args = parser_obj.parse_args(argv)

    settings = _load_settings(args, parser_obj)
    exporter_options = _load_exporter_options(args.exporter_config, parser_obj)
    exporters = load_exporters(args.exporters or [], exporter_options)

    resolver = PortResolver(settings)
    results: List[LookupResult] = [resolver.lookup(pid) for pid in args.pids]

    if args.quiet:
        for result in results:
            print(_render_quiet(result))
    else:
        print(reporting.render_text_report(results))

    payload = reporting.build_payload(results)
    if args.output_json:
        reporting.save_json_report(args.output_json, payload)
        if not args.quiet:
            print(f"[+] Structured report saved to {args.output_json}")

    for exporter in exporters:
        try:
            exporter.export(payload)
        except Exception as exc:
            print(f"[-] Exporter {getattr(exporter, 'name', 'unknown')} failed: {exc}", file=sys.stderr)

    failures = [result for result in results if not result.success]
    if failures:
        if not args.quiet:
            print(f"\n[-] {len(failures)} lookup(s) failed.", file=sys.stderr)
        return 1
    return 0
