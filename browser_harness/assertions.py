"""Default assertion object handed to page results.

Messages follow the ``expected <actual> to <verb> <expected>`` format so
failures read the same regardless of which test runner reports them.
"""

from __future__ import annotations

from typing import Any, Optional


def inspect_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return "'" + value.replace("'", "\\'") + "'"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        return "[ " + ", ".join(inspect_value(item) for item in value) + " ]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        pairs = ", ".join(f"{key}: {inspect_value(item)}" for key, item in value.items())
        return "{ " + pairs + " }"
    return repr(value)


class Assert:
    """Minimal assertion capability: equality, inclusion and truthiness."""

    def _fail(self, message: Optional[str], default: str) -> None:
        raise AssertionError(message or default)

    def equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        if actual != expected:
            self._fail(message, f"expected {inspect_value(actual)} to equal {inspect_value(expected)}")

    def not_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        if actual == expected:
            self._fail(message, f"expected {inspect_value(actual)} to not equal {inspect_value(expected)}")

    def deep_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        if _normalise(actual) != _normalise(expected):
            self._fail(
                message,
                f"expected {inspect_value(actual)} to deeply equal {inspect_value(expected)}",
            )

    def include(self, haystack: Any, needle: Any, message: Optional[str] = None) -> None:
        try:
            found = needle in haystack
        except TypeError:
            found = False
        if not found:
            self._fail(message, f"expected {inspect_value(haystack)} to include {inspect_value(needle)}")

    def is_true(self, value: Any, message: Optional[str] = None) -> None:
        if value is not True:
            self._fail(message, f"expected {inspect_value(value)} to be true")

    def is_false(self, value: Any, message: Optional[str] = None) -> None:
        if value is not False:
            self._fail(message, f"expected {inspect_value(value)} to be false")


def _normalise(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_normalise(item) for item in value]
    if isinstance(value, list):
        return [_normalise(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalise(item) for key, item in value.items()}
    return value
