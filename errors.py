"""Error taxonomy for the storefront API.

Every error carries the HTTP status it maps to; ``main`` renders them as
``{"status": "error", "message": ...}``.

- StorefrontError (base)
- ValidationError / InvalidStatus (400)
- Unauthorized (401)
- NotFound (404)
- RateLimited (429)
- StorageFailure (500)
- NotificationFailure (logged only, never rendered)
"""

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Missing or malformed caller input. Not retried."""

    status_code = 400
    default_message = "Invalid request"


class InvalidStatus(ValidationError):
    default_message = "Invalid status"


class Unauthorized(StorefrontError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class RateLimited(StorefrontError):
    status_code = 429
    default_message = "Too many requests, try again later."


class StorageFailure(StorefrontError):
    """The store could not be read or written. Detail is logged, not returned."""

    status_code = 500
    default_message = "Storage unavailable"


class NotificationFailure(StorefrontError):
    """An outbound notification failed. Never surfaced to the caller."""

    default_message = "Notification failed"
