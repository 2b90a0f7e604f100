"""HTTP client for talking to a running remote browser service."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .models import ActionResult, CreateSessionResponse, HealthResponse


class BrowserServiceClient:
    """Wrapper around the service HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def get_health(self) -> HealthResponse:
        async with self._client() as client:
            response = await client.get("/health")
            response.raise_for_status()
            data = response.json()
        return HealthResponse.model_validate(data)

    async def create_session(self, *, api_key: str, project_id: str) -> str:
        payload = {"apiKey": api_key, "projectId": project_id}
        async with self._client() as client:
            response = await client.post("/session/create", json=payload)
            response.raise_for_status()
            data = response.json()
        return CreateSessionResponse.model_validate(data).session_id

    async def act(
        self,
        session_id: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> ActionResult:
        payload = {"action": action, "params": params or {}}
        async with self._client() as client:
            response = await client.post(f"/session/{session_id}/action", json=payload)
            response.raise_for_status()
            data = response.json()
        return ActionResult.model_validate(data)

    async def close_session(self, session_id: str) -> None:
        async with self._client() as client:
            response = await client.post(f"/session/{session_id}/close")
            response.raise_for_status()
