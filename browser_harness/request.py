"""Page session: opens one page, configures it and navigates to a URL."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type
from urllib.parse import urlsplit

from playwright.async_api import Browser as EngineBrowser, Page

from .assertions import Assert
from .base import BaseRequest
from .response import DEFAULT_WAIT_TIMEOUT_MS, PageResult

log = logging.getLogger(__name__)


class PageSession(BaseRequest):
    """A single visit, configured before :meth:`end` opens the page.

    ``header`` and ``cookie`` calls accumulate settings that are applied to
    the new page right before navigation.
    """

    response_class: Type[PageResult] = PageResult

    def __init__(
        self,
        browser: EngineBrowser,
        url: str,
        assert_: Optional[Assert] = None,
        *,
        response_class: Optional[Type[PageResult]] = None,
        wait_timeout_ms: float = DEFAULT_WAIT_TIMEOUT_MS,
    ) -> None:
        super().__init__()
        self._browser = browser
        self._url = url
        self._headers: Dict[str, str] = {}
        self._assert = assert_
        self._wait_timeout_ms = wait_timeout_ms
        if response_class is not None:
            self.response_class = response_class
        self.page: Optional[Page] = None

    @property
    def url(self) -> str:
        return self._url

    def header(self, key: str, value: Any) -> "PageSession":
        self._headers[key] = str(value)
        return self

    async def _set_headers(self, page: Page) -> None:
        if not self._headers:
            return
        await page.set_extra_http_headers(self._headers)

    async def _set_cookies(self, page: Page) -> None:
        if not self.cookies:
            return
        domain = urlsplit(self._url).hostname
        cookies: List[Dict[str, Any]] = [
            {"name": cookie["key"], "value": str(cookie["value"]), "domain": domain, "path": "/"}
            for cookie in self.cookies
        ]
        await page.context.add_cookies(cookies)

    async def end(self, **options: Any) -> PageResult:
        """Open the page, navigate to the URL and return the result."""

        self.page = await self._browser.new_page()
        await self.exec("before")
        await self._set_headers(self.page)
        await self._set_cookies(self.page)

        log.debug("Visiting %s", self._url)
        response = await self.page.goto(self._url, **options)

        await self.exec("after")
        return await self.response_class.create(
            self.page,
            self._assert,
            response,
            wait_timeout_ms=self._wait_timeout_ms,
        )
