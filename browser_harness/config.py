"""Configuration loader for the browser harness."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


ENV_PREFIX = "HARNESS_"

DEFAULTS: Dict[str, Any] = {
    "base_url": "",
    "executable_path": None,
    "headless": True,
    "navigation_timeout_ms": 30000,
    "wait_timeout_ms": 15000,
    "browser_type": "chromium",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes"}


@dataclass(slots=True)
class HarnessConfig:
    base_url: str = DEFAULTS["base_url"]
    executable_path: Optional[str] = DEFAULTS["executable_path"]
    headless: bool = DEFAULTS["headless"]
    navigation_timeout_ms: int = DEFAULTS["navigation_timeout_ms"]
    wait_timeout_ms: int = DEFAULTS["wait_timeout_ms"]
    browser_type: str = DEFAULTS["browser_type"]

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Any]) -> "HarnessConfig":
        data = dict(DEFAULTS)
        data.update(mapping)
        executable = str(data.get("executable_path") or "").strip()
        return cls(
            base_url=str(data["base_url"] or ""),
            executable_path=executable or None,
            headless=_as_bool(data["headless"]),
            navigation_timeout_ms=int(data["navigation_timeout_ms"]),
            wait_timeout_ms=int(data["wait_timeout_ms"]),
            browser_type=str(data["browser_type"]),
        )


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(config_path: Path | None = None) -> HarnessConfig:
    """Load configuration from environment, optional TOML file, and defaults."""

    env_map: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            env_map[key[len(ENV_PREFIX):].lower()] = value

    file_map: Dict[str, Any] = {}
    path = config_path or Path("config.toml")
    if path.exists():
        file_map = _load_toml(path).get("harness", {})

    merged = {**file_map, **env_map}
    known = {key: value for key, value in merged.items() if key in DEFAULTS}
    return HarnessConfig.from_mapping(known)
