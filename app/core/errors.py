"""
Domain errors raised by services and the report store.

Routes let these propagate; app.main maps each one to an HTTP status.
"""

from typing import Any, Optional


class ReportError(Exception):
    """Base class for every error the reporting backend raises on purpose."""

    status_code: int = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ReportError):
    """Malformed or missing submission fields. Nothing was stored."""

    status_code = 400


class NotFoundError(ReportError):
    """An operation referenced a report or image that does not exist."""

    status_code = 404

    def __init__(self, kind: str, item_id: Any):
        super().__init__(f"{kind} {item_id} not found")
        self.kind = kind
        self.item_id = item_id


class AuthorizationError(ReportError):
    """Wrong credential for an administrative operation. No state change."""

    status_code = 403


class StoreError(ReportError):
    """The backing store could not be read or written."""

    status_code = 503
