"""Hard errors raised by the edit pipeline.

Recovery problems (unparseable or vacuous model output) are not exceptions;
they are returned as outcomes from ``ai_edit.models.outcome``.
"""

from __future__ import annotations


class EditError(Exception):
    """Base class for errors that stop the pipeline."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message}


class RequestValidationError(EditError, ValueError):
    """Malformed or missing request fields, raised before any generation call."""

    status_code = 400


class UnknownActionError(RequestValidationError, KeyError):
    """Action identifier not present in the registry."""

    def __init__(self, action: str):
        super().__init__(f"Unknown action: {action}")
        self.action = action

    def __str__(self) -> str:
        return self.message


class MissingCredentialError(EditError):
    status_code = 500

    def __init__(self, message: str = "API key not configured"):
        super().__init__(message)


class TransportError(EditError):
    """Network, DNS or timeout failure reaching the generator."""

    status_code = 502

    def __init__(self, message: str = "Network error reaching AI"):
        super().__init__(message)


class BackendError(EditError):
    """Generator was reachable but answered with a non-success status."""

    status_code = 502

    def __init__(self, upstream_status: int, detail: str = ""):
        super().__init__(f"AI API error: {upstream_status}")
        self.upstream_status = upstream_status
        self.detail = detail

    def to_payload(self) -> dict:
        return {"error": self.message, "status": self.upstream_status}
