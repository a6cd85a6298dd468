"""Browser wrapper owning one Playwright engine handle."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Type
from urllib.parse import urlsplit

from playwright.async_api import Browser as EngineBrowser, Playwright, async_playwright

from .assertions import Assert
from .config import HarnessConfig, load_config
from .errors import BrowserNotLaunchedError
from .executable import build_launch_options
from .request import PageSession
from .response import PageResult

log = logging.getLogger(__name__)

SessionCallback = Callable[[PageSession], Any]


class Browser:
    """Launches the engine on first use and turns visits into page results."""

    def __init__(
        self,
        config: Optional[HarnessConfig] = None,
        *,
        assert_: Optional[Assert] = None,
        request_class: Type[PageSession] = PageSession,
        response_class: Type[PageResult] = PageResult,
        launch_options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.config = config or load_config()
        self.request_class = request_class
        self.response_class = response_class
        self._assert = assert_
        self._launch_options = dict(launch_options or {})
        self._playwright: Optional[Playwright] = None
        self._engine: Optional[EngineBrowser] = None
        self._launching: Optional[asyncio.Future] = None

    @property
    def is_launched(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> EngineBrowser:
        if self._engine is None:
            raise BrowserNotLaunchedError()
        return self._engine

    async def __aenter__(self) -> "Browser":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _start(self, options: Dict[str, Any]) -> EngineBrowser:
        launch = build_launch_options(self.config, options)
        log.debug(
            "Launching %s (headless=%s, executable=%s)",
            self.config.browser_type,
            launch.headless,
            launch.executable_path or "bundled",
        )
        playwright = await async_playwright().start()
        try:
            engine = await getattr(playwright, self.config.browser_type).launch(**launch.to_launch_kwargs())
        except Exception:
            await playwright.stop()
            raise
        self._playwright = playwright
        self._engine = engine
        return engine

    async def launch(self, **options: Any) -> EngineBrowser:
        """Start the engine, or return the running one.

        Concurrent callers share a single in-flight launch.
        """

        if self._engine is not None:
            return self._engine
        launching = self._launching
        if launching is None:
            launching = asyncio.ensure_future(self._start({**self._launch_options, **options}))
            self._launching = launching
        try:
            return await asyncio.shield(launching)
        finally:
            if self._launching is launching and launching.done():
                self._launching = None

    def resolve_url(self, url: str) -> str:
        if urlsplit(url).scheme or not self.config.base_url:
            return url
        return f"{self.config.base_url.rstrip('/')}/{url.lstrip('/')}"

    async def visit(self, url: str, callback: Optional[SessionCallback] = None, **options: Any) -> PageResult:
        """Open ``url`` in a new page.

        ``callback`` receives the :class:`PageSession` before navigation, which
        is the place to add headers or cookies.
        """

        engine = await self.launch()
        session = self.request_class(
            engine,
            self.resolve_url(url),
            self._assert,
            response_class=self.response_class,
            wait_timeout_ms=self.config.wait_timeout_ms,
        )
        if callback is not None:
            callback(session)
        options.setdefault("timeout", self.config.navigation_timeout_ms)
        return await session.end(**options)

    async def close(self) -> None:
        launching = self._launching
        if launching is not None and not launching.done():
            try:
                await asyncio.shield(launching)
            except Exception as error:
                # The launching caller receives the error; _start already stopped Playwright.
                log.warning("Launch failed while closing %s: %s", self.config.browser_type, error)
        engine, playwright = self._engine, self._playwright
        self._engine = None
        self._playwright = None
        self._launching = None
        if engine is not None:
            await engine.close()
            log.debug("Closed %s", self.config.browser_type)
        if playwright is not None:
            await playwright.stop()
