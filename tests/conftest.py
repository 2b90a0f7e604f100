from __future__ import annotations

from typing import Any, Callable, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from remote_browser_service.browser.base import (
    BrowserConnection,
    BrowserProvider,
    DisconnectResult,
)
from remote_browser_service.errors import ProvisioningError
from remote_browser_service.models import SessionCredentials


class FakeLocator:
    def __init__(self, page: "FakePage", kind: str, target: str) -> None:
        self.page = page
        self.kind = kind
        self.target = target

    @property
    def first(self) -> "FakeLocator":
        return self

    async def click(self, timeout: Optional[float] = None) -> None:
        self.page.calls.append(("click", self.kind, self.target, timeout))
        self._ensure_match(timeout)

    async def fill(self, text: str, timeout: Optional[float] = None) -> None:
        self.page.calls.append(("fill", self.kind, self.target, timeout))
        self._ensure_match(timeout)
        self.page.filled[self.target] = text

    def _ensure_match(self, timeout: Optional[float]) -> None:
        self.page.ensure_open()
        if self.kind == "selector" and self.target in self.page.multi_selectors:
            raise PlaywrightError(
                f"strict mode violation: locator(\"{self.target}\") resolved to 2 elements"
            )
        if not self.page.matches(self.kind, self.target):
            raise PlaywrightTimeoutError(
                f"Timeout {timeout:.0f}ms exceeded waiting for {self.kind}={self.target}"
            )


class FakeMouse:
    def __init__(self, page: "FakePage") -> None:
        self.page = page

    async def wheel(self, delta_x: float, delta_y: float) -> None:
        self.page.ensure_open()
        self.page.wheel_deltas.append((delta_x, delta_y))


class FakePage:
    """Minimal async page double recording every interaction."""

    def __init__(
        self,
        *,
        title: str = "Example Domain",
        selectors: Optional[set[str]] = None,
        texts: Optional[list[str]] = None,
        labels: Optional[list[str]] = None,
        body: str = "Example body text",
        screenshot_bytes: Optional[bytes] = b"jpeg-bytes",
        multi_selectors: Optional[set[str]] = None,
    ) -> None:
        self.page_title = title
        self.selectors = selectors or set()
        self.multi_selectors = multi_selectors or set()
        self.texts = texts or []
        self.labels = labels or []
        self.body = body
        self.screenshot_bytes = screenshot_bytes
        self.closed = False
        self.url = "about:blank"
        self.calls: list[tuple[Any, ...]] = []
        self.filled: dict[str, str] = {}
        self.waits: list[float] = []
        self.wheel_deltas: list[tuple[float, float]] = []
        self.mouse = FakeMouse(self)

    def ensure_open(self) -> None:
        if self.closed:
            raise PlaywrightError("Target page, context or browser has been closed")

    def matches(self, kind: str, target: str) -> bool:
        if kind == "selector":
            return target in self.selectors or target in self.multi_selectors
        pool = self.texts if kind == "text" else self.labels
        return any(target.lower() in item.lower() for item in pool)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, "selector", selector)

    async def click(self, selector: str, timeout: Optional[float] = None) -> None:
        self.calls.append(("click", "selector", selector, timeout))
        self._ensure_first_match(selector, timeout)

    async def fill(self, selector: str, text: str, timeout: Optional[float] = None) -> None:
        self.calls.append(("fill", "selector", selector, timeout))
        self._ensure_first_match(selector, timeout)
        self.filled[selector] = text

    def _ensure_first_match(self, selector: str, timeout: Optional[float]) -> None:
        self.ensure_open()
        if not self.matches("selector", selector):
            raise PlaywrightTimeoutError(
                f"Timeout {timeout:.0f}ms exceeded waiting for selector={selector}"
            )

    def get_by_text(self, text: str, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, "text", text)

    def get_by_label(self, text: str, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, "label", text)

    async def goto(self, url: str, wait_until: str = "load", timeout: float = 0) -> None:
        self.ensure_open()
        self.calls.append(("goto", url, wait_until, timeout))
        if "unreachable" in url:
            raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.url = url

    async def title(self) -> str:
        self.ensure_open()
        return self.page_title

    async def wait_for_timeout(self, timeout: float) -> None:
        self.waits.append(timeout)

    async def evaluate(self, expression: str, arg: Any = None) -> str:
        self.ensure_open()
        self.calls.append(("evaluate", expression, arg))
        return self.body

    async def screenshot(self, type: str = "png", quality: Optional[int] = None) -> bytes:
        self.ensure_open()
        if self.screenshot_bytes is None:
            raise PlaywrightError("screenshot failed")
        self.calls.append(("screenshot", type, quality))
        return self.screenshot_bytes


class FakeBrowser:
    def __init__(self, fail_close: bool = False) -> None:
        self.fail_close = fail_close
        self.closed = False

    async def close(self) -> None:
        if self.fail_close:
            raise PlaywrightError("Browser already disconnected")
        self.closed = True


class StubProvider(BrowserProvider):
    def __init__(self, page_factory: Callable[[], FakePage]) -> None:
        self.page_factory = page_factory
        self.connections: list[BrowserConnection] = []
        self.disconnected: list[BrowserConnection] = []
        self.fail_connect: Optional[str] = None
        self.fail_close = False
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def connect(self, credentials: SessionCredentials) -> BrowserConnection:
        if self.fail_connect:
            raise ProvisioningError(self.fail_connect)
        connection = BrowserConnection(
            browser=FakeBrowser(fail_close=self.fail_close),
            page=self.page_factory(),
        )
        self.connections.append(connection)
        return connection

    async def disconnect(self, connection: BrowserConnection) -> DisconnectResult:
        self.disconnected.append(connection)
        connection.page.closed = True
        try:
            await connection.browser.close()
        except PlaywrightError as exc:
            return DisconnectResult(error=exc)
        return DisconnectResult()


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_page() -> Callable[..., FakePage]:
    return FakePage


@pytest.fixture
def page() -> FakePage:
    return FakePage(
        selectors={"#submit", "input[name=q]"},
        texts=["Sign in to continue", "More information..."],
        labels=["Email address", "Password"],
    )


@pytest.fixture
def provider(page: FakePage) -> StubProvider:
    def new_page() -> FakePage:
        return FakePage(
            title=page.page_title,
            selectors=set(page.selectors),
            texts=list(page.texts),
            labels=list(page.labels),
            body=page.body,
        )

    return StubProvider(new_page)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
