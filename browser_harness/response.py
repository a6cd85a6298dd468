"""Live view of a browser page and its most recent main-frame response."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union
from urllib.parse import parse_qs, urldefrag, urlsplit

from playwright.async_api import ElementHandle, Frame, Page, Response

from .assertions import Assert
from .base import BaseResponse
from .chain import ActionChain
from .errors import ElementNotFoundError
from .scripts import (
    GET_ATTRIBUTE_SCRIPT,
    GET_ATTRIBUTES_SCRIPT,
    GET_VALUE_SCRIPT,
    INNER_HTML_SCRIPT,
    INNER_TEXT_SCRIPT,
    IS_CHECKED_SCRIPT,
    IS_VISIBLE_SCRIPT,
    NOT_FOUND,
    PAGE_TEXT_SCRIPT,
    spread_call,
    spread_element_call,
)

log = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT_MS = 15_000

# Looked up by promise-style consumers; a result must never pose as a chain here.
_NEVER_FORWARDED = frozenset({"then", "catch"})

HeaderValue = Union[str, List[str]]


def split_set_cookie(headers: Dict[str, Any]) -> Dict[str, HeaderValue]:
    """Lower-case header names and expand a newline-joined ``set-cookie`` value."""

    normalised: Dict[str, HeaderValue] = {str(key).lower(): value for key, value in headers.items()}
    cookies = normalised.get("set-cookie")
    if isinstance(cookies, str) and cookies:
        normalised["set-cookie"] = cookies.split("\n")
    return normalised


def document_url(url: str) -> str:
    """Drop the fragment; response URLs never carry one while frame URLs do."""

    return urldefrag(url).url


class PageResult(BaseResponse):
    """The test's view of one page.

    ``status`` and ``headers`` track the latest main-frame response as the
    page navigates. Navigation responses are held in a pending map keyed by
    URL and only adopted once their URL is the main frame's current URL, so
    redirect hops and sub-resources never leak into the reported state.

    Any chain operation can be called directly on the result; the call starts
    a fresh :class:`ActionChain`::

        await result.type("[name=q]", "virk").click("button").wait_for_navigation()
    """

    def __init__(
        self,
        page: Page,
        assert_: Optional[Assert] = None,
        *,
        wait_timeout_ms: float = DEFAULT_WAIT_TIMEOUT_MS,
    ) -> None:
        super().__init__(assert_, {})
        self.page = page
        self.wait_timeout_ms = wait_timeout_ms
        self.navigation_count = 0
        self._pending: Dict[str, Response] = {}
        self._updates: Set[asyncio.Future] = set()
        self._generation = 0
        self._closed = False
        self._listeners: List[Tuple[str, Callable[..., Any]]] = []
        self._register("response", self._on_response)
        self._register("framenavigated", self._on_frame_navigated)

    @classmethod
    async def create(
        cls,
        page: Page,
        assert_: Optional[Assert] = None,
        response: Optional[Response] = None,
        **kwargs: Any,
    ) -> "PageResult":
        result = cls(page, assert_, **kwargs)
        if response is not None:
            await result.update_response(response)
        await result.refresh_text()
        return result

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name in _NEVER_FORWARDED:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        try:
            return getattr(self.chain(), name)
        except AttributeError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} status={self.status} url={self.url!r}>"

    async def __aenter__(self) -> "PageResult":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def url(self) -> str:
        return self.page.url

    @property
    def redirects(self) -> List[str]:
        return []

    def chain(self) -> ActionChain:
        return ActionChain(self)

    # ------------------------------------------------------------------
    # Response reconciliation

    def _register(self, event: str, handler: Callable[..., Any]) -> None:
        self.page.on(event, handler)
        self._listeners.append((event, handler))

    def _is_main_frame(self, frame: Optional[Frame]) -> bool:
        return frame is not None and frame == self.page.main_frame

    def _on_response(self, response: Response) -> None:
        if not response.request.is_navigation_request() or not self._is_main_frame(response.frame):
            return
        url = document_url(response.url)
        if url == document_url(self.page.url):
            self._adopt(response)
        else:
            self._pending[url] = response

    def _on_frame_navigated(self, frame: Frame) -> None:
        if not self._is_main_frame(frame):
            return
        self.navigation_count += 1
        response = self._pending.pop(document_url(frame.url), None)
        if response is not None:
            self._adopt(response)

    def _adopt(self, response: Response) -> None:
        dropped = [url for url in self._pending if url != document_url(response.url)]
        if dropped:
            log.debug("Discarding pending responses for %s", ", ".join(dropped))
        self._pending.clear()
        self._generation += 1
        task = asyncio.ensure_future(self._apply_response(response, self._generation))
        self._updates.add(task)
        task.add_done_callback(self._updates.discard)

    async def _apply_response(self, response: Response, generation: int) -> None:
        headers = await response.all_headers()
        if generation != self._generation:
            log.debug("Ignoring superseded response for %s", response.url)
            return
        self.status = response.status
        self.update_headers(split_set_cookie(headers))
        log.debug("Adopted %s response for %s", response.status, response.url)

    async def update_response(self, response: Response) -> None:
        """Make ``response`` the current response of this page."""

        self._generation += 1
        await self._apply_response(response, self._generation)

    async def settle(self) -> None:
        """Wait for in-flight response reconciliation to finish."""

        if self._updates:
            await asyncio.gather(*list(self._updates))

    async def refresh_text(self) -> None:
        self.text = await self.get_text()

    async def follow_navigation(self, *, since: Optional[int] = None, timeout: Optional[float] = None) -> int:
        """Wait for the main frame to navigate and load, then sync the response.

        With ``since``, a navigation already committed after that count
        satisfies the wait, so one triggered by an earlier action is not missed.
        Returns the navigation count once the page has loaded.
        """

        if since is None or self.navigation_count <= since:
            await self.page.wait_for_event("framenavigated", predicate=self._is_main_frame, timeout=timeout)
        await self.page.wait_for_load_state("load", timeout=timeout)
        await self.settle()
        await self.refresh_text()
        return self.navigation_count

    # ------------------------------------------------------------------
    # Reads

    async def evaluate(self, fn: str, *args: Any) -> Any:
        if args:
            return await self.page.evaluate(spread_call(fn), list(args))
        return await self.page.evaluate(fn)

    async def eval_on_selector(self, selector: str, fn: str, *args: Any) -> Any:
        if args:
            return await self.page.eval_on_selector(selector, spread_element_call(fn), list(args))
        return await self.page.eval_on_selector(selector, fn)

    async def get_text(self, selector: Optional[str] = None) -> str:
        if not selector:
            return await self.page.evaluate(PAGE_TEXT_SCRIPT)
        return await self.page.eval_on_selector(selector, INNER_TEXT_SCRIPT)

    async def get_html(self, selector: Optional[str] = None) -> str:
        if not selector:
            return await self.page.content()
        return await self.page.eval_on_selector(selector, INNER_HTML_SCRIPT)

    async def get_title(self) -> str:
        return await self.page.title()

    async def get_element(self, selector: str) -> Optional[ElementHandle]:
        return await self.page.query_selector(selector)

    async def has_element(self, selector: str) -> bool:
        return await self.page.query_selector(selector) is not None

    async def is_checked(self, selector: str) -> bool:
        return await self.page.eval_on_selector(selector, IS_CHECKED_SCRIPT)

    async def is_visible(self, selector: str) -> bool:
        return await self.page.eval_on_selector(selector, IS_VISIBLE_SCRIPT)

    async def get_value(self, selector: str) -> Any:
        """Return the value of the first match.

        Radio buttons and checkboxes yield the value of the first checked item
        in the group (``None`` when nothing is checked); a multi-select yields
        the list of selected option values.
        """

        value = await self.page.evaluate(GET_VALUE_SCRIPT, [selector, NOT_FOUND])
        if value == NOT_FOUND:
            raise ElementNotFoundError(selector)
        return value

    async def get_attribute(self, selector: str, attribute: str) -> Optional[str]:
        return await self.page.eval_on_selector(selector, GET_ATTRIBUTE_SCRIPT, attribute)

    async def get_attributes(self, selector: str) -> Dict[str, str]:
        return await self.page.eval_on_selector(selector, GET_ATTRIBUTES_SCRIPT)

    def get_path(self) -> str:
        return urlsplit(self.page.url).path

    def get_query_params(self) -> Dict[str, HeaderValue]:
        parsed = parse_qs(urlsplit(self.page.url).query, keep_blank_values=True)
        return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}

    def get_query_param(self, key: str) -> Optional[HeaderValue]:
        return self.get_query_params().get(key)

    # ------------------------------------------------------------------
    # Assertions

    async def assert_has(self, expected: str) -> None:
        self._assert.include(await self.get_text(), expected)

    async def assert_has_in(self, selector: str, expected: str) -> None:
        self._assert.include(await self.get_text(selector), expected)

    async def assert_attribute(self, selector: str, attribute: str, expected: Any) -> None:
        self._assert.equal(await self.get_attribute(selector, attribute), expected)

    # ------------------------------------------------------------------

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for event, handler in self._listeners:
            self.page.remove_listener(event, handler)
        self._listeners.clear()
        self._pending.clear()
        for task in list(self._updates):
            task.cancel()
        if not self.page.is_closed():
            await self.page.close()
        log.debug("Closed page %s", self.page.url)
