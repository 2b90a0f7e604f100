"""Factories for constructing components from configuration."""

from __future__ import annotations

from fastapi import FastAPI

from .browser.base import BrowserProvider
from .browser.playwright_provider import PlaywrightBrowserProvider
from .config import BrowserConfig, ServiceConfig
from .service.app import create_app


def build_provider(config: BrowserConfig) -> BrowserProvider:
    return PlaywrightBrowserProvider(config)


def build_app(config: ServiceConfig) -> FastAPI:
    return create_app(config, provider=build_provider(config.browser))
