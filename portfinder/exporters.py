"""
Exporters that ship a lookup payload (see ``reporting.build_payload``) somewhere.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional


class LookupExporter:
    name = "exporter"

    def __init__(self, options: Optional[Dict] = None):
        self.options = options or {}

    def export(self, payload: Dict) -> None:
        raise NotImplementedError


class StdoutExporter(LookupExporter):
    """Print one line per pid, or the whole payload with ``{"format": "json"}``."""

    name = "stdout"

    def export(self, payload: Dict) -> None:
        if self.options.get("format") == "json":
            print(json.dumps(payload, indent=2))
            return
        for entry in payload.get("results", []):
            if entry.get("error"):
                status = f"error={entry.get('error_kind') or 'error'}"
            else:
                status = f"ports={','.join(entry.get('ports') or []) or '-'}"
            print(f"[export] pid={entry['pid']} platform={entry.get('platform') or '?'} {status}")


class JsonLinesExporter(LookupExporter):
    name = "jsonl"

    def export(self, payload: Dict) -> None:
        path = Path(self.options.get("path", "portfinder.jsonl"))
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload) + "\n")


EXPORTERS_BY_NAME = {cls.name: cls for cls in (StdoutExporter, JsonLinesExporter)}


def load_exporters(names: Iterable[str], options: Dict[str, Dict]) -> List[LookupExporter]:
    loaded: List[LookupExporter] = []
    for name in names:
        exporter_cls = EXPORTERS_BY_NAME.get(name)
        if exporter_cls is None:
            print(f"[-] Unknown exporter '{name}' (available: {', '.join(sorted(EXPORTERS_BY_NAME))})")
            continue
        loaded.append(exporter_cls(options.get(name, {})))
    return loaded
