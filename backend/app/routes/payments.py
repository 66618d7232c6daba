"""
VendorBridge Backend — Payment Route
======================================

POST /api/create-payment-intent → {"clientSecret": "..."}

The intent always enables Stripe's automatic payment methods; which methods
actually show up is decided in the Stripe dashboard.
"""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_payment_service
from app.schemas.common import ErrorResponse
from app.schemas.payment import PaymentIntentRequest, PaymentIntentResponse
from app.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Payments"])


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={
        400: {"description": "Invalid amount or currency", "model": ErrorResponse},
        500: {"description": "Stripe error", "model": ErrorResponse},
    },
    summary="Create a Stripe PaymentIntent",
)
async def create_payment_intent(
    body: PaymentIntentRequest,
    payments: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    logger.info("PaymentIntent request: amount=%d currency=%s", body.amount, body.currency)
    intent = await payments.create_payment_intent(
        amount=body.amount,
        currency=body.currency,
        automatic_payment_methods=True,
    )
    return PaymentIntentResponse(client_secret=intent.client_secret)
