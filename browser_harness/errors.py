"""Exceptions raised by the browser harness itself.

Engine failures (navigation, timeouts, evaluation errors) and assertion
failures are never wrapped; only conditions the harness detects on its own
are reported through these types.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class HarnessError(Exception):
    def __init__(self, message: str, *, code: str = "HARNESS_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ElementNotFoundError(HarnessError):
    def __init__(self, selector: str):
        super().__init__(
            f"Node not found for selector {selector!r}",
            code="ELEMENT_NOT_FOUND",
            details={"selector": selector},
        )
        self.selector = selector


class ChainSettledError(HarnessError):
    def __init__(self, operation: str):
        super().__init__(
            f"Cannot add '{operation}' to an action chain that has already been awaited",
            code="CHAIN_SETTLED",
            details={"operation": operation},
        )


class BrowserNotLaunchedError(HarnessError):
    def __init__(self, message: str = "Browser has not been launched"):
        super().__init__(message, code="BROWSER_NOT_LAUNCHED")
