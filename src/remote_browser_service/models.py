"""Shared data models for requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActionType(str, Enum):
    """Action kinds the executor understands."""

    NAVIGATE = "navigate"
    CLICK = "click"
    TYPE_TEXT = "type_text"
    SCROLL = "scroll"
    WAIT = "wait"
    GET_PAGE_CONTENT = "get_page_content"

    @classmethod
    def parse(cls, value: str) -> Optional["ActionType"]:
        try:
            return cls(value)
        except ValueError:
            return None


class ActionRequest(BaseModel):
    """Action requested against an existing session."""

    action: str
    params: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def _default_params(cls, value: Any) -> Any:
        return {} if value is None else value


class ActionResult(BaseModel):
    """Observation returned after an action attempt."""

    observation: str
    screenshot: str = ""
    error: Optional[str] = None


class SessionCredentials(BaseModel):
    """Credentials forwarded to the provisioning endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field(default=None, alias="apiKey")
    project_id: Optional[str] = Field(default=None, alias="projectId")


class CreateSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    active_sessions: int = Field(alias="activeSessions")


class CloseResponse(BaseModel):
    ok: bool = True
