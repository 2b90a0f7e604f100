"""Route action requests to sessions and shape their results."""

from __future__ import annotations

import logging

from ..browser.actions import ActionExecutor
from ..browser.screenshot import ScreenshotCapturer
from ..errors import ActionError, SessionNotFoundError, UnknownActionError
from ..models import ActionRequest, ActionResult, ActionType
from ..sessions.store import SessionStore

LOGGER = logging.getLogger(__name__)


class RequestDispatcher:
    """Execute actions for a session and always return an observation.

    Unknown sessions and unknown action kinds are raised as client errors.
    Failures while executing the action are folded into the result together
    with a screenshot of whatever the page shows afterwards.
    """

    def __init__(
        self,
        store: SessionStore,
        executor: ActionExecutor,
        capturer: ScreenshotCapturer,
    ) -> None:
        self._store = store
        self._executor = executor
        self._capturer = capturer

    async def handle(self, session_id: str, request: ActionRequest) -> ActionResult:
        session = self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if ActionType.parse(request.action) is None:
            raise UnknownActionError(request.action)

        page = session.page
        try:
            observation = await self._executor.execute(page, request)
        except ActionError as exc:
            message = str(exc)
            LOGGER.error('Action "%s" error: %s', request.action, message)
            screenshot = await self._capturer.capture(page)
            return ActionResult(
                observation=f"Action failed: {message}",
                error=message,
                screenshot=screenshot,
            )
        screenshot = await self._capturer.capture(page)
        return ActionResult(observation=observation, screenshot=screenshot)
