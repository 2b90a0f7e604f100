"""Best-effort page screenshots."""

from __future__ import annotations

import base64
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)


class ScreenshotCapturer:
    """Capture compressed screenshots, returning an empty string on failure."""

    def __init__(self, quality: int = 50) -> None:
        self._quality = quality

    async def capture(self, page: Any) -> str:
        try:
            data = await page.screenshot(type="jpeg", quality=self._quality)
        except Exception as exc:
            LOGGER.warning("Screenshot error: %s", exc)
            return ""
        return base64.b64encode(data).decode("ascii")
