"""Deferred, awaitable chains of page interactions and assertions."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Optional, Sequence, Union

from .errors import ChainSettledError, ElementNotFoundError
from .models import EvalExpectation
from .scripts import (
    CHECK_SCRIPT,
    CLEAR_SCRIPT,
    COUNT_SCRIPT,
    ELEMENT_MISSING_SCRIPT,
    SELECT_OPTIONS_SCRIPT,
    SUBMIT_FORM_SCRIPT,
    UNCHECK_SCRIPT,
    spread_call,
)

if TYPE_CHECKING:
    from .response import PageResult

log = logging.getLogger(__name__)

Action = Callable[[], Any]
Callback = Callable[[Any], Any]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class ActionChain:
    """Ordered page operations that run in series once the chain is awaited.

    Every method records a zero-argument operation and returns the chain, so a
    whole interaction reads as one expression::

        text = await result.chain().click("a").wait_for_navigation().get_text()

    Awaiting runs the operations one after another and resolves to the value
    of the last one. The outcome is memoized: awaiting again returns the same
    value (or raises the same error) without running anything twice. The
    first failing operation rejects the chain and the rest are skipped.
    """

    def __init__(self, result: "PageResult") -> None:
        self._res = result
        self._actions: List[Action] = []
        self._settlement: Optional[asyncio.Future] = None
        self._navigation_mark = result.navigation_count
        self._next_mark = result.navigation_count

    def __repr__(self) -> str:
        return f"<ActionChain operations={self.pending_operations} settled={self._settlement is not None}>"

    @property
    def pending_operations(self) -> int:
        return len(self._actions)

    @property
    def _page(self):
        return self._res.page

    def _push(self, name: str, action: Action) -> "ActionChain":
        if self._settlement is not None:
            raise ChainSettledError(name)
        self._actions.append(action)
        return self

    def _timeout(self, timeout: Optional[float]) -> float:
        return timeout if timeout is not None else self._res.wait_timeout_ms

    # ------------------------------------------------------------------
    # Settlement

    async def _run(self) -> Any:
        log.debug("Running action chain with %d operations", len(self._actions))
        result = None
        self._next_mark = self._res.navigation_count
        for action in self._actions:
            # Navigation waits look back to the start of the previous operation,
            # or to the end of the previous navigation wait.
            self._navigation_mark = self._next_mark
            self._next_mark = self._res.navigation_count
            result = await _resolve(action())
        return result

    def _settle(self) -> asyncio.Future:
        if self._settlement is None:
            self._settlement = asyncio.ensure_future(self._run())
        return self._settlement

    def __await__(self):
        return self._settle().__await__()

    async def then(self, on_fulfilled: Optional[Callback] = None, on_rejected: Optional[Callback] = None) -> Any:
        try:
            value = await self._settle()
        except Exception as error:
            if on_rejected is None:
                raise
            return await _resolve(on_rejected(error))
        if on_fulfilled is None:
            return value
        return await _resolve(on_fulfilled(value))

    async def catch(self, on_rejected: Callback) -> Any:
        return await self.then(None, on_rejected)

    # ------------------------------------------------------------------
    # Interactions

    def click(self, selector: str, **options: Any) -> "ActionChain":
        return self._push("click", lambda: self._page.click(selector, **options))

    def double_click(self, selector: str, **options: Any) -> "ActionChain":
        cloned = {**options, "click_count": 2}
        return self._push("double_click", lambda: self._page.click(selector, **cloned))

    def right_click(self, selector: str, **options: Any) -> "ActionChain":
        cloned = {**options, "button": "right"}
        return self._push("right_click", lambda: self._page.click(selector, **cloned))

    def type(self, selector: str, text: Any, **options: Any) -> "ActionChain":
        return self._push("type", lambda: self._page.type(selector, str(text), **options))

    def select(self, selector: str, values: Union[str, Sequence[str]]) -> "ActionChain":
        values = list(values) if isinstance(values, (list, tuple)) else [values]
        return self._push(
            "select", lambda: self._page.eval_on_selector(selector, SELECT_OPTIONS_SCRIPT, values)
        )

    def check(self, selector: str) -> "ActionChain":
        return self._push("check", lambda: self._page.eval_on_selector(selector, CHECK_SCRIPT))

    def uncheck(self, selector: str) -> "ActionChain":
        return self._push("uncheck", lambda: self._page.eval_on_selector(selector, UNCHECK_SCRIPT))

    def radio(self, selector: str, value: str) -> "ActionChain":
        target = f'{selector}[value^="{value}"]'
        return self._push("radio", lambda: self._page.eval_on_selector(target, CHECK_SCRIPT))

    def submit_form(self, selector: str) -> "ActionChain":
        return self._push(
            "submit_form", lambda: self._page.eval_on_selector(selector, SUBMIT_FORM_SCRIPT)
        )

    def clear(self, selector: str) -> "ActionChain":
        return self._push("clear", lambda: self._page.eval_on_selector(selector, CLEAR_SCRIPT))

    def attach(self, selector: str, files: Union[str, Sequence[str]]) -> "ActionChain":
        files = list(files) if isinstance(files, (list, tuple)) else [files]

        async def action() -> None:
            element = await self._res.get_element(selector)
            if element is None:
                raise ElementNotFoundError(selector)
            await element.set_input_files(files)

        return self._push("attach", action)

    def screenshot(self, path: str, **options: Any) -> "ActionChain":
        cloned = {**options, "path": path}
        return self._push("screenshot", lambda: self._page.screenshot(**cloned))

    def evaluate(self, fn: str, *args: Any) -> "ActionChain":
        return self._push("evaluate", lambda: self._res.evaluate(fn, *args))

    def eval_on_selector(self, selector: str, fn: str, *args: Any) -> "ActionChain":
        return self._push("eval_on_selector", lambda: self._res.eval_on_selector(selector, fn, *args))

    # ------------------------------------------------------------------
    # Waiting

    def wait_for_selector(self, selector: str, **options: Any) -> "ActionChain":
        return self._push("wait_for_selector", lambda: self._page.wait_for_selector(selector, **options))

    def wait_for_function(
        self,
        fn: str,
        *args: Any,
        timeout: Optional[float] = None,
        polling: Optional[Union[float, str]] = None,
    ) -> "ActionChain":
        options = {key: value for key, value in (("timeout", timeout), ("polling", polling)) if value is not None}

        def action() -> Awaitable[Any]:
            if args:
                return self._page.wait_for_function(spread_call(fn), arg=list(args), **options)
            return self._page.wait_for_function(fn, **options)

        return self._push("wait_for_function", action)

    def wait_for_timeout(self, timeout: float) -> "ActionChain":
        return self._push("wait_for_timeout", lambda: self._page.wait_for_timeout(timeout))

    def wait_for(self, target: Union[str, int, float], **options: Any) -> "ActionChain":
        """Wait for a selector when given a string, or sleep for a number of milliseconds."""

        if isinstance(target, bool) or not isinstance(target, (str, int, float)):
            raise TypeError(f"wait_for expects a selector or a timeout, got {target!r}")
        if isinstance(target, str):
            return self.wait_for_selector(target, **options)
        return self.wait_for_timeout(target)

    def wait_for_element(self, selector: str, timeout: Optional[float] = None) -> "ActionChain":
        return self.wait_for_selector(selector, timeout=self._timeout(timeout))

    def pause(self, timeout: Optional[float] = None) -> "ActionChain":
        return self.wait_for_timeout(self._timeout(timeout))

    def wait_until_missing(self, selector: str, **options: Any) -> "ActionChain":
        return self._push(
            "wait_until_missing",
            lambda: self._page.wait_for_function(ELEMENT_MISSING_SCRIPT, arg=selector, **options),
        )

    def wait_for_navigation(self, timeout: Optional[float] = None) -> "ActionChain":
        async def action() -> None:
            self._next_mark = await self._res.follow_navigation(since=self._navigation_mark, timeout=timeout)

        return self._push("wait_for_navigation", action)

    # ------------------------------------------------------------------
    # Reads

    def get_text(self, selector: Optional[str] = None) -> "ActionChain":
        return self._push("get_text", lambda: self._res.get_text(selector))

    def get_html(self, selector: Optional[str] = None) -> "ActionChain":
        return self._push("get_html", lambda: self._res.get_html(selector))

    def get_title(self) -> "ActionChain":
        return self._push("get_title", self._res.get_title)

    def get_element(self, selector: str) -> "ActionChain":
        return self._push("get_element", lambda: self._res.get_element(selector))

    def get_attribute(self, selector: str, attribute: str) -> "ActionChain":
        return self._push("get_attribute", lambda: self._res.get_attribute(selector, attribute))

    def get_attributes(self, selector: str) -> "ActionChain":
        return self._push("get_attributes", lambda: self._res.get_attributes(selector))

    def get_value(self, selector: str) -> "ActionChain":
        return self._push("get_value", lambda: self._res.get_value(selector))

    def get_path(self) -> "ActionChain":
        return self._push("get_path", self._res.get_path)

    def get_query_params(self) -> "ActionChain":
        return self._push("get_query_params", self._res.get_query_params)

    def get_query_param(self, key: str) -> "ActionChain":
        return self._push("get_query_param", lambda: self._res.get_query_param(key))

    def has_element(self, selector: str) -> "ActionChain":
        return self._push("has_element", lambda: self._res.has_element(selector))

    def is_visible(self, selector: str) -> "ActionChain":
        return self._push("is_visible", lambda: self._res.is_visible(selector))

    def is_checked(self, selector: str) -> "ActionChain":
        return self._push("is_checked", lambda: self._res.is_checked(selector))

    # ------------------------------------------------------------------
    # Assertions

    def _assert_with(self, name: str, read: Callable[[], Any], check: Callable[[Any], None]) -> "ActionChain":
        async def action() -> None:
            check(await _resolve(read()))

        return self._push(name, action)

    def assert_has(self, expected: str) -> "ActionChain":
        return self._assert_with(
            "assert_has", self._res.get_text, lambda actual: self._res._assert.include(actual, expected)
        )

    def assert_has_in(self, selector: str, expected: str) -> "ActionChain":
        return self._assert_with(
            "assert_has_in",
            lambda: self._res.get_text(selector),
            lambda actual: self._res._assert.include(actual, expected),
        )

    def assert_header(self, key: str, value: Any) -> "ActionChain":
        return self._push("assert_header", lambda: self._res.assert_header(key, value))

    def assert_status(self, expected: int) -> "ActionChain":
        return self._push("assert_status", lambda: self._res.assert_status(expected))

    def assert_attribute(self, selector: str, attribute: str, expected: Any) -> "ActionChain":
        return self._assert_with(
            "assert_attribute",
            lambda: self._res.get_attribute(selector, attribute),
            lambda actual: self._res._assert.deep_equal(actual, expected),
        )

    def assert_value(self, selector: str, expected: Any) -> "ActionChain":
        return self._assert_with(
            "assert_value",
            lambda: self._res.get_value(selector),
            lambda actual: self._res._assert.deep_equal(actual, expected),
        )

    def assert_is_checked(self, selector: str) -> "ActionChain":
        return self._assert_with(
            "assert_is_checked", lambda: self._res.is_checked(selector), self._res._assert.is_true
        )

    def assert_is_not_checked(self, selector: str) -> "ActionChain":
        return self._assert_with(
            "assert_is_not_checked", lambda: self._res.is_checked(selector), self._res._assert.is_false
        )

    def assert_is_visible(self, selector: str) -> "ActionChain":
        return self._assert_with(
            "assert_is_visible", lambda: self._res.is_visible(selector), self._res._assert.is_true
        )

    def assert_is_not_visible(self, selector: str) -> "ActionChain":
        return self._assert_with(
            "assert_is_not_visible", lambda: self._res.is_visible(selector), self._res._assert.is_false
        )

    def assert_path(self, expected: str) -> "ActionChain":
        return self._assert_with(
            "assert_path", self._res.get_path, lambda actual: self._res._assert.deep_equal(actual, expected)
        )

    def assert_query_params(self, expected: dict) -> "ActionChain":
        return self._assert_with(
            "assert_query_params",
            self._res.get_query_params,
            lambda actual: self._res._assert.deep_equal(actual, expected),
        )

    def assert_query_param(self, key: str, expected: Any) -> "ActionChain":
        return self._assert_with(
            "assert_query_param",
            lambda: self._res.get_query_param(key),
            lambda actual: self._res._assert.deep_equal(actual, expected),
        )

    def assert_exists(self, selector: str) -> "ActionChain":
        return self._assert_with(
            "assert_exists", lambda: self._res.has_element(selector), self._res._assert.is_true
        )

    def assert_not_exists(self, selector: str) -> "ActionChain":
        return self._assert_with(
            "assert_not_exists", lambda: self._res.has_element(selector), self._res._assert.is_false
        )

    def assert_title(self, expected: str) -> "ActionChain":
        return self._assert_with(
            "assert_title", self._res.get_title, lambda actual: self._res._assert.deep_equal(actual, expected)
        )

    def assert_body(self, expected: str) -> "ActionChain":
        return self._assert_with(
            "assert_body", self._res.get_text, lambda actual: self._res._assert.deep_equal(actual, expected)
        )

    def assert_eval(self, selector: str, fn: str, expected: Any, *, args: Any = None) -> "ActionChain":
        """Assert the value ``fn(element, *args)`` returns for the first match of ``selector``."""

        expectation = EvalExpectation(args=args, expected=expected)
        return self._assert_with(
            "assert_eval",
            lambda: self._res.eval_on_selector(selector, fn, *expectation.args),
            lambda actual: self._res._assert.deep_equal(actual, expectation.expected),
        )

    def assert_fn(self, fn: str, expected: Any, *, args: Any = None) -> "ActionChain":
        """Assert the value ``fn(*args)`` returns when evaluated in the page."""

        expectation = EvalExpectation(args=args, expected=expected)
        return self._assert_with(
            "assert_fn",
            lambda: self._res.evaluate(fn, *expectation.args),
            lambda actual: self._res._assert.deep_equal(actual, expectation.expected),
        )

    def assert_count(self, selector: str, expected: int) -> "ActionChain":
        return self._assert_with(
            "assert_count",
            lambda: self._page.evaluate(COUNT_SCRIPT, selector),
            lambda actual: self._res._assert.deep_equal(actual, expected),
        )
