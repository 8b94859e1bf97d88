"""
Configuration helpers for the port finder.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .darwin import DEFAULT_LSOF
from .linux import DEFAULT_PROC_ROOT
from .windows import DEFAULT_POWERSHELL

ENV_PREFIX = "PORTFINDER_"
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigLoadError(RuntimeError):
    """Raised when a configuration file cannot be loaded."""


@dataclass(frozen=True)
class ResolverSettings:
    proc_root: Path = DEFAULT_PROC_ROOT
    powershell: str = DEFAULT_POWERSHELL
    lsof: str = DEFAULT_LSOF
    strict: bool = False
    timeout: Optional[float] = None
    platform: Optional[str] = None

    def with_overrides(self, **overrides: Any) -> "ResolverSettings":
        values = {key: value for key, value in overrides.items() if value is not None}
        if "proc_root" in values:
            values["proc_root"] = Path(values["proc_root"])
        return replace(self, **values)


def load_config(path: str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"Failed to parse config JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigLoadError("Config file must contain a JSON object.")
    return data


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigLoadError(f"Invalid boolean for {key}: {value!r}")


def _parse_timeout(key: str, value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigLoadError(f"Invalid timeout for {key}: {value!r}")
    if timeout <= 0:
        raise ConfigLoadError(f"Timeout for {key} must be positive.")
    return timeout


def _env_values(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key in ("proc_root", "powershell", "lsof", "strict", "timeout", "platform"):
        env_key = f"{ENV_PREFIX}{key.upper()}"
        if env_key in environ:
            values[key] = environ[env_key]
    return values


def settings_from_sources(
    config_data: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolverSettings:
    """
    Build settings from a config mapping, then let PORTFINDER_* environment
    variables override it.
    """
    environ = os.environ if environ is None else environ
    merged: Dict[str, Any] = {}
    for source in (config_data or {}, _env_values(environ)):
        for key, value in source.items():
            merged[key] = value

    settings = ResolverSettings()
    if merged.get("proc_root"):
        settings = replace(settings, proc_root=Path(str(merged["proc_root"])))
    if merged.get("powershell"):
        settings = replace(settings, powershell=str(merged["powershell"]))
    if merged.get("lsof"):
        settings = replace(settings, lsof=str(merged["lsof"]))
    if "strict" in merged:
        settings = replace(settings, strict=_parse_bool("strict", merged["strict"]))
    if "timeout" in merged:
        settings = replace(settings, timeout=_parse_timeout("timeout", merged["timeout"]))
    if merged.get("platform"):
        settings = replace(settings, platform=str(merged["platform"]))
    return settings


def load_settings(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> ResolverSettings:
    config_data = load_config(path) if path else {}
    return settings_from_sources(config_data, environ)
