"""Error taxonomy shared by the session manager, executor and HTTP layer."""

from __future__ import annotations


class ServiceError(RuntimeError):
    """Base class for errors carrying an HTTP status code."""

    status_code = 500


class ClientError(ServiceError):
    """Raised when a request is malformed or refers to unknown resources."""

    status_code = 400


class MissingFieldError(ClientError):
    """Raised when required request fields are absent."""


class SessionNotFoundError(ClientError):
    """Raised when a session identifier is not registered."""

    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found")
        self.session_id = session_id


class UnknownActionError(ClientError):
    """Raised for action kinds outside the supported set."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown action: {action}")
        self.action = action


class ProvisioningError(ServiceError):
    """Raised when connecting to the remote browser fails or times out."""


class ActionError(ServiceError):
    """Raised when a single browser action fails to execute."""
