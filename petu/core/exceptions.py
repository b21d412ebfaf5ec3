"""
Exception hierarchy for the petu service.
Every error carries the HTTP status it maps to, so the API layer can render
all of them as ``{"success": false, "error": ...}``.
"""

from typing import Optional


class PetuError(Exception):
    """Base exception for all petu errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = "PETU_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(PetuError):
    """Missing or invalid input."""

    status_code = 400

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="VALIDATION_ERROR", **kwargs)


class EmailTakenError(ValidationError):
    def __init__(self, email: str):
        super().__init__(
            f"Email {email} is already registered", details={"email": email}
        )
        self.error_code = "EMAIL_TAKEN"


class AuthenticationError(PetuError):
    """Bad credentials or an unusable token."""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, error_code="AUTHENTICATION_ERROR")


class EventNotFoundError(PetuError):
    status_code = 404

    def __init__(self, event_id):
        super().__init__(
            f"Event {event_id} not found",
            error_code="EVENT_NOT_FOUND",
            details={"event_id": event_id},
        )


class JoinRequestNotFoundError(PetuError):
    status_code = 404

    def __init__(self, request_id):
        super().__init__(
            f"Join request {request_id} not found",
            error_code="JOIN_REQUEST_NOT_FOUND",
            details={"request_id": request_id},
        )


class EventFullError(PetuError):
    """The event already reached its capacity."""

    status_code = 409

    def __init__(self, event_id):
        super().__init__(
            "Event is full.",
            error_code="EVENT_FULL",
            details={"event_id": event_id},
        )


class JoinBusyError(PetuError):
    """The per-event join lock could not be acquired."""

    status_code = 409

    def __init__(self, event_id):
        super().__init__(
            "Could not acquire lock, please try again.",
            error_code="JOIN_BUSY",
            details={"event_id": event_id},
        )


class StorageError(PetuError):
    """Unclassified failure of the storage backend; the message is passed through."""

    status_code = 500

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="STORAGE_ERROR", **kwargs)
