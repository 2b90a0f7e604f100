"""Playwright-powered provider connecting to remotely hosted browsers."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

from playwright.async_api import Error, async_playwright

from ..config import BrowserConfig
from ..errors import ProvisioningError
from ..models import SessionCredentials
from .base import BrowserConnection, BrowserProvider, DisconnectResult

LOGGER = logging.getLogger(__name__)


class PlaywrightBrowserProvider(BrowserProvider):
    """Connect to a remote Chromium over CDP using Playwright."""

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        self._config = config or BrowserConfig()
        self._playwright = None

    async def start(self) -> None:
        if self._playwright:
            return
        LOGGER.debug("Starting Playwright driver")
        self._playwright = await async_playwright().start()

    async def stop(self) -> None:
        LOGGER.debug("Stopping Playwright driver")
        if self._playwright:
            await self._playwright.stop()
        self._playwright = None

    def build_target(self, credentials: SessionCredentials) -> str:
        query = urlencode({"apiKey": credentials.api_key, "projectId": credentials.project_id})
        separator = "&" if "?" in self._config.endpoint else "?"
        return f"{self._config.endpoint}{separator}{query}"

    async def connect(self, credentials: SessionCredentials) -> BrowserConnection:
        if not self._playwright:
            await self.start()
        LOGGER.info("Connecting to remote browser at %s", self._config.endpoint)
        try:
            browser = await self._playwright.chromium.connect_over_cdp(
                self.build_target(credentials),
                timeout=self._config.connect_timeout * 1000,
            )
        except Error as exc:
            raise ProvisioningError(str(exc)) from exc
        try:
            contexts = browser.contexts
            context = contexts[0] if contexts else await browser.new_context()
            pages = context.pages
            page = pages[0] if pages else await context.new_page()
        except Error as exc:
            result = await self.disconnect(BrowserConnection(browser=browser, page=None))
            if not result.ok:
                LOGGER.warning("Failed to release browser after setup error: %s", result.error)
            raise ProvisioningError(str(exc)) from exc
        return BrowserConnection(browser=browser, page=page)

    async def disconnect(self, connection: BrowserConnection) -> DisconnectResult:
        try:
            await connection.browser.close()
        except Exception as exc:
            return DisconnectResult(error=exc)
        return DisconnectResult()
