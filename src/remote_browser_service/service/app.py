"""FastAPI application exposing browser sessions over HTTP."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..browser.actions import ActionExecutor
from ..browser.base import BrowserProvider
from ..browser.playwright_provider import PlaywrightBrowserProvider
from ..browser.screenshot import ScreenshotCapturer
from ..config import ServiceConfig
from ..errors import ServiceError
from ..models import (
    ActionRequest,
    ActionResult,
    CloseResponse,
    CreateSessionResponse,
    HealthResponse,
    SessionCredentials,
)
from ..sessions.manager import SessionManager
from ..sessions.store import SessionStore
from .dispatcher import RequestDispatcher

LOGGER = logging.getLogger(__name__)


def create_app(
    config: Optional[ServiceConfig] = None,
    *,
    provider: Optional[BrowserProvider] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Wire the session components together behind the HTTP routes."""

    config = config or ServiceConfig()
    provider = provider or PlaywrightBrowserProvider(config.browser)
    store = SessionStore()
    manager = SessionManager(provider, store, config.sessions, clock=clock)
    dispatcher = RequestDispatcher(
        store,
        ActionExecutor(config.actions),
        ScreenshotCapturer(quality=config.actions.screenshot_quality),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await provider.start()
        manager.start()
        LOGGER.info("Remote browser service ready")
        try:
            yield
        finally:
            await manager.stop()
            await manager.shutdown()
            await provider.stop()

    app = FastAPI(title="Remote Browser Service", lifespan=lifespan)
    app.state.config = config
    app.state.manager = manager
    app.state.dispatcher = dispatcher

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _describe_validation(exc)})

    @app.get("/health", response_model=HealthResponse, response_model_by_alias=True)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", active_sessions=len(store))

    @app.post(
        "/session/create",
        response_model=CreateSessionResponse,
        response_model_by_alias=True,
    )
    async def create_session(
        credentials: Optional[SessionCredentials] = None,
    ) -> CreateSessionResponse:
        session_id = await manager.create(credentials or SessionCredentials())
        return CreateSessionResponse(session_id=session_id)

    @app.post(
        "/session/{session_id}/action",
        response_model=ActionResult,
        response_model_exclude_none=True,
    )
    async def run_action(session_id: str, request: ActionRequest) -> ActionResult:
        return await dispatcher.handle(session_id, request)

    @app.post("/session/{session_id}/close", response_model=CloseResponse)
    async def close_session(session_id: str) -> CloseResponse:
        await manager.close(session_id)
        return CloseResponse(ok=True)

    return app


def _describe_validation(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        problems.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Invalid request: " + "; ".join(problems)
