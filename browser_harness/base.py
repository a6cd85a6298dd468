"""Host test-framework contract extended by the browser request and response.

A test runner may supply its own subclasses of these types; the browser only
relies on the members defined here.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, List, Optional

from .assertions import Assert

Hook = Callable[["BaseRequest"], Any]

HOOK_STAGES = ("before", "after")


class BaseRequest:
    def __init__(self) -> None:
        self.cookies: List[Dict[str, Any]] = []
        self._hooks: Dict[str, List[Hook]] = {stage: [] for stage in HOOK_STAGES}

    def cookie(self, key: str, value: Any) -> "BaseRequest":
        self.cookies.append({"key": key, "value": value})
        return self

    def before(self, hook: Hook) -> "BaseRequest":
        self._hooks["before"].append(hook)
        return self

    def after(self, hook: Hook) -> "BaseRequest":
        self._hooks["after"].append(hook)
        return self

    async def exec(self, stage: str) -> None:
        """Run the hooks registered for ``stage`` in registration order."""

        if stage not in self._hooks:
            raise ValueError(f"Unknown hook stage: {stage}")
        for hook in self._hooks[stage]:
            result = hook(self)
            if inspect.isawaitable(result):
                await result


class BaseResponse:
    def __init__(self, assert_: Optional[Assert], headers: Optional[Dict[str, Any]] = None) -> None:
        self._assert = assert_ or Assert()
        self.headers: Dict[str, Any] = dict(headers or {})
        self.status: Optional[int] = None
        self.text: str = ""

    @property
    def body(self) -> Any:
        return self.text

    def update_headers(self, headers: Dict[str, Any]) -> None:
        self.headers = headers

    def assert_status(self, expected: int) -> None:
        self._assert.equal(self.status, expected)

    def assert_text(self, expected: str) -> None:
        self._assert.equal(self.text, expected)

    def assert_body(self, expected: Any) -> None:
        try:
            self._assert.deep_equal(self.body, expected)
        except AssertionError:
            self._assert.equal(self.text, expected)

    def assert_json(self, expected: Any) -> None:
        self._assert.deep_equal(self.body, expected)

    def assert_error(self, expected: Any) -> None:
        self.assert_body(expected)

    def assert_header(self, key: str, value: Any) -> None:
        self._assert.equal(self.headers.get(key.lower()), value)
