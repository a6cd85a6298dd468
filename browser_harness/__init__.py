"""Browser-driven test harness built on Playwright."""

from .assertions import Assert
from .base import BaseRequest, BaseResponse
from .browser import Browser
from .chain import ActionChain
from .config import HarnessConfig, load_config
from .errors import BrowserNotLaunchedError, ChainSettledError, ElementNotFoundError, HarnessError
from .jar import BrowsersJar
from .request import PageSession
from .response import PageResult

__all__ = [
    "ActionChain",
    "Assert",
    "BaseRequest",
    "BaseResponse",
    "Browser",
    "BrowserNotLaunchedError",
    "BrowsersJar",
    "ChainSettledError",
    "ElementNotFoundError",
    "HarnessConfig",
    "HarnessError",
    "PageResult",
    "PageSession",
    "load_config",
]
