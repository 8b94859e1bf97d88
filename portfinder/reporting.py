"""
Helpers for rendering and saving lookup results.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Sequence

from .resolver import LookupResult


def render_lookup(result: LookupResult) -> str:
    lines: List[str] = [f"=== PID {result.pid} ==="]
    if result.platform:
        lines.append(f"[*] Platform: {result.platform}")
    if result.error:
        lines.append(f"[-] Lookup failed: {result.error}")
    elif result.ports:
        lines.append(f"[+] TCP ports: {', '.join(result.ports)}")
    else:
        lines.append("[-] No TCP ports found.")
    return "\n".join(lines)


def render_text_report(results: Sequence[LookupResult]) -> str:
    if not results:
        return "[-] No lookups performed."
    return "\n\n".join(render_lookup(result) for result in results)


def summarize_results(results: Sequence[LookupResult]) -> Dict:
    return {
        "lookups": len(results),
        "with_ports": sum(1 for result in results if result.found),
        "failures": sum(1 for result in results if not result.success),
    }


def build_payload(results: Sequence[LookupResult]) -> Dict:
    return {
        "results": [result.to_dict() for result in results],
        "summary": summarize_results(results),
    }


def save_json_report(path: str, data) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")
