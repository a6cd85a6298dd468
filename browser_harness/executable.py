"""Browser executable resolution and launch option merging."""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from .config import HarnessConfig
from .models import LaunchOptions

logger = logging.getLogger(__name__)


def resolve_executable_path(path: Optional[str], system: Optional[str] = None) -> Optional[str]:
    """
    Point a macOS application bundle at the binary inside it.

    Args:
        path: Configured executable path, possibly an ``.app`` bundle.
        system: Platform name as returned by ``platform.system()``.

    Returns:
        str: Path to the executable, or None when no path is configured
    """
    if not path:
        return None
    system = system or platform.system()
    bundle = Path(path)
    if system == "Darwin" and bundle.suffix == ".app":
        resolved = bundle / "Contents" / "MacOS" / bundle.stem
        logger.debug("Resolved application bundle %s to %s", path, resolved)
        return str(resolved)
    return path


def build_launch_options(
    config: HarnessConfig,
    overrides: Optional[Dict[str, Any]] = None,
    system: Optional[str] = None,
) -> LaunchOptions:
    """Merge caller options over the configured executable path and headless flag."""
    merged: Dict[str, Any] = {
        "executable_path": config.executable_path,
        "headless": config.headless,
    }
    merged.update(overrides or {})
    options = LaunchOptions.model_validate(merged)
    options.executable_path = resolve_executable_path(options.executable_path, system)
    return options
