"""Execution of high-level actions against a browser page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence

from playwright.async_api import Error

from ..config import ActionConfig
from ..errors import ActionError, UnknownActionError
from ..models import ActionRequest, ActionType

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionStrategy:
    """One way of turning a caller supplied target into a page element."""

    name: str
    locate: Callable[[Any, str], Any]


class _PageSelector:
    """Act through the page so a selector matching several elements uses the first."""

    def __init__(self, page: Any, selector: str) -> None:
        self._page = page
        self._selector = selector

    async def click(self, timeout: float) -> None:
        await self._page.click(self._selector, timeout=timeout)

    async def fill(self, text: str, timeout: float) -> None:
        await self._page.fill(self._selector, text, timeout=timeout)


BY_SELECTOR = ResolutionStrategy("selector", _PageSelector)
BY_TEXT = ResolutionStrategy(
    "text",
    lambda page, target: page.get_by_text(target, exact=False).first,
)
BY_LABEL = ResolutionStrategy(
    "label",
    lambda page, target: page.get_by_label(target, exact=False).first,
)

CLICK_STRATEGIES: tuple[ResolutionStrategy, ...] = (BY_SELECTOR, BY_TEXT)
FILL_STRATEGIES: tuple[ResolutionStrategy, ...] = (BY_SELECTOR, BY_LABEL)


class ActionExecutor:
    """Perform a single action on a page and describe the outcome."""

    def __init__(self, config: Optional[ActionConfig] = None) -> None:
        self._config = config or ActionConfig()

    async def execute(self, page: Any, request: ActionRequest) -> str:
        action = ActionType.parse(request.action)
        if action is None:
            raise UnknownActionError(request.action)
        params = request.params
        LOGGER.info("Executing browser action %s", action.value)
        try:
            if action == ActionType.NAVIGATE:
                return await self._navigate(page, params)
            if action == ActionType.CLICK:
                return await self._click(page, params)
            if action == ActionType.TYPE_TEXT:
                return await self._type_text(page, params)
            if action == ActionType.SCROLL:
                return await self._scroll(page, params)
            if action == ActionType.WAIT:
                return await self._wait(page, params)
            return await self._get_page_content(page)
        except ActionError:
            raise
        except Exception as exc:
            raise ActionError(str(exc) or type(exc).__name__) from exc

    async def resolve(
        self,
        page: Any,
        target: str,
        strategies: Sequence[ResolutionStrategy],
        operate: Callable[[Any, float], Awaitable[None]],
    ) -> ResolutionStrategy:
        """Apply ``operate`` to the element found by each strategy in turn.

        Every attempt gets its own element timeout. Returns the strategy that
        succeeded, or raises ``ActionError`` with the last failure once all
        strategies are exhausted.
        """

        timeout = _to_timeout(self._config.element_timeout)
        last_error: Optional[Error] = None
        for strategy in strategies:
            try:
                await operate(strategy.locate(page, target), timeout)
            except Error as exc:
                LOGGER.debug("Strategy %s failed for %r: %s", strategy.name, target, exc)
                last_error = exc
                continue
            return strategy
        message = str(last_error) if last_error else f"No element matched {target}"
        raise ActionError(message)

    async def _navigate(self, page: Any, params: dict[str, Any]) -> str:
        url = _require(params, "url", "Navigate action requires a URL")
        await page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=_to_timeout(self._config.navigation_timeout),
        )
        title = await page.title()
        return f'Navigated to {url}. Title: "{title}"'

    async def _click(self, page: Any, params: dict[str, Any]) -> str:
        selector = _require(params, "selector", "Click action requires a selector")
        strategy = await self.resolve(
            page,
            selector,
            CLICK_STRATEGIES,
            lambda element, timeout: element.click(timeout=timeout),
        )
        await page.wait_for_timeout(_to_timeout(self._config.click_settle))
        if strategy is BY_TEXT:
            return f'Clicked element with text: "{selector}"'
        return f"Clicked element: {selector}"

    async def _type_text(self, page: Any, params: dict[str, Any]) -> str:
        selector = _require(params, "selector", "Type action requires a selector")
        text = params.get("text")
        if text is None:
            raise ActionError("Type action requires text")
        text = str(text)
        await self.resolve(
            page,
            selector,
            FILL_STRATEGIES,
            lambda element, timeout: element.fill(text, timeout=timeout),
        )
        return f'Typed "{text}" into {selector}'

    async def _scroll(self, page: Any, params: dict[str, Any]) -> str:
        amount = abs(_to_int(params.get("amount"), self._config.default_scroll_amount, "amount"))
        direction = params.get("direction") or "down"
        delta = -amount if direction == "up" else amount
        await page.mouse.wheel(0, delta)
        await page.wait_for_timeout(_to_timeout(self._config.scroll_settle))
        return f"Scrolled {direction} by {amount}px"

    async def _wait(self, page: Any, params: dict[str, Any]) -> str:
        ms = _to_int(params.get("ms"), self._config.default_wait_ms, "ms")
        await page.wait_for_timeout(ms)
        return f"Waited {ms}ms"

    async def _get_page_content(self, page: Any) -> str:
        limit = self._config.content_limit
        content = await page.evaluate(
            "(limit) => document.body.innerText.substring(0, limit)",
            limit,
        )
        return f"Page content:\n{(content or '')[:limit]}"


def _require(params: dict[str, Any], key: str, message: str) -> str:
    value = params.get(key)
    if not value:
        raise ActionError(message)
    return str(value)


def _to_int(value: Any, default: int, name: str) -> int:
    if not value:
        return default
    try:
        return int(value) or default
    except (TypeError, ValueError) as exc:
        raise ActionError(f"Invalid {name}: {value!r}") from exc


def _to_timeout(seconds: float) -> float:
    return seconds * 1000
