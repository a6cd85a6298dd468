"""Registry of browsers used across a test run."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from .browser import Browser, SessionCallback
from .config import HarnessConfig, load_config
from .response import PageResult

log = logging.getLogger(__name__)


class BrowsersJar:
    """Holds one lazily created default browser plus any explicit browsers.

    Each jar is independent, so test suites can keep their own::

        async with BrowsersJar() as jar:
            result = await jar.visit("/")
    """

    def __init__(self, config: Optional[HarnessConfig] = None, **browser_options: Any) -> None:
        self.config = config or load_config()
        self.browsers: List[Browser] = []
        self._browser_options = browser_options
        self._default: Optional[Browser] = None

    @property
    def default(self) -> Browser:
        if self._default is None:
            self._default = Browser(self.config, **self._browser_options)
        return self._default

    def new_browser(self, **launch_options: Any) -> Browser:
        options = dict(self._browser_options)
        options["launch_options"] = {**(options.get("launch_options") or {}), **launch_options}
        browser = Browser(self.config, **options)
        self.browsers.append(browser)
        return browser

    async def launch(self, **options: Any) -> Browser:
        await self.default.launch(**options)
        return self.default

    async def visit(self, url: str, callback: Optional[SessionCallback] = None, **options: Any) -> PageResult:
        return await self.default.visit(url, callback, **options)

    async def close(self) -> None:
        """Close the default browser; the next visit launches a fresh one."""

        browser, self._default = self._default, None
        if browser is not None:
            await browser.close()

    async def close_existing_browsers(self) -> None:
        browsers, self.browsers = self.browsers, []
        if browsers:
            log.debug("Closing %d browsers", len(browsers))
            await asyncio.gather(*(browser.close() for browser in browsers))

    async def close_all(self) -> None:
        await self.close()
        await self.close_existing_browsers()

    async def __aenter__(self) -> "BrowsersJar":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close_all()
