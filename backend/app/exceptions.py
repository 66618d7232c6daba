"""
VendorBridge Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the three failure kinds this
       service knows about.
Why:   Routes and services raise domain errors; global handlers in main.py
       translate them into HTTP status codes and one JSON error shape.
How:   Each exception carries a user-facing message and a context dict.
Who:   Raised by services, gateways and dependencies; caught by handlers.

Exception Hierarchy:
    VendorBridgeError (base)
    ├── UserInputError   → 400 Bad Request (missing file, missing identifier)
    ├── NotFoundError    → 404 Not Found (no matching stored object)
    └── ProviderError    → 500 Internal Server Error (payment, storage, mail)

Error body (all handlers):
    {
        "error": "No file was sent",
        "code": "user_input_error",
        "details": {"field": "file"},
        "request_id": "a1b2c3d4"
    }
"""

from typing import Any, Dict, Optional


class VendorBridgeError(Exception):
    """
    Base exception for all VendorBridge application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Extra details, returned as "details" for client errors and
                  logged server-side for provider errors
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UserInputError(VendorBridgeError):
    """
    Raised when the client sent something we cannot act on.

    When:    No file in the multipart body, empty user id, unsupported image
             type, oversized upload, malformed JSON body.
    HTTP:    400 Bad Request
    """

    code = "user_input_error"

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(VendorBridgeError):
    """
    Raised when no stored object matches the requested identifier.

    When:    Latest-image lookup with no candidates, image fetch for a user
             that never uploaded an avatar.
    HTTP:    404 Not Found
    """

    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ProviderError(VendorBridgeError):
    """
    Raised when a third-party collaborator fails or is not configured.

    What:    Wraps any exception coming out of the Stripe, Supabase or Resend
             SDKs. The collaborator's own message is surfaced to the caller.
    When:    Upstream rejects the call, network failure, missing credentials.
    HTTP:    500 Internal Server Error

    No retries: the failure is reported immediately.
    """

    code = "provider_error"

    def __init__(
        self,
        provider: str,
        message: str = "Upstream provider request failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["provider"] = provider
        super().__init__(message=message, context=ctx)
        self.provider = provider
