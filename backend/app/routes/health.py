"""
VendorBridge Backend — Health Check Route
===========================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Reports which collaborator clients were built at startup. It does not
       call Stripe, Supabase or Resend: probes run every few seconds and
       must not spend vendor quota.

Status levels:
    healthy:  all three collaborators configured
    degraded: at least one missing (its endpoints answer 500)
"""

import time

from fastapi import APIRouter, Request

from app import __version__
from app.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


def _state(app_state, attr: str) -> str:
    return "configured" if getattr(app_state, attr, None) is not None else "not_configured"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    state = request.app.state
    storage = _state(state, "storage")
    payments = _state(state, "payments")
    mail = _state(state, "mailer")
    overall = "healthy" if {storage, payments, mail} == {"configured"} else "degraded"
    return HealthResponse(
        status=overall,
        version=__version__,
        storage=storage,
        payments=payments,
        mail=mail,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
