"""Browser provider abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..models import SessionCredentials


@dataclass
class BrowserConnection:
    """Live connection to a remote browser and the page actions run against."""

    browser: Any
    page: Any


@dataclass
class DisconnectResult:
    """Outcome of a best-effort disconnect."""

    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BrowserProvider(ABC):
    """Interface for provisioning remote browser connections."""

    async def start(self) -> None:
        """Prepare any driver resources shared across connections."""

    async def stop(self) -> None:
        """Release driver resources."""

    @abstractmethod
    async def connect(self, credentials: SessionCredentials) -> BrowserConnection:
        """Open a connection and pick a context and page.

        Raises ``ProvisioningError`` when the endpoint rejects the connection
        or does not answer in time.
        """

    @abstractmethod
    async def disconnect(self, connection: BrowserConnection) -> DisconnectResult:
        """Close a connection, reporting failures instead of raising them."""
