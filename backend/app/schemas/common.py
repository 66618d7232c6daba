"""
VendorBridge Backend — Shared Response Schemas
================================================

Error and health payloads used by every router and by the exception
handlers in main.py.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body returned for every 4xx/5xx.

    Example:
        {
            "error": "No file was sent",
            "code": "user_input_error",
            "details": {"field": "file"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error kind")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    Returned by GET /health.

    Collaborator fields report whether a client was built at startup
    ("configured") or not ("not_configured"); no upstream call is made.
    """
    status: str = Field(description="healthy when every collaborator is configured, else degraded")
    version: str = Field(description="Application version")
    storage: str = Field(description="Supabase storage client state")
    payments: str = Field(description="Stripe client state")
    mail: str = Field(description="Resend client state")
    uptime_seconds: float = Field(description="Seconds since service started")
