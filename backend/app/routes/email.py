"""
VendorBridge Backend — Order Confirmation Email Route
=======================================================

POST /api/send-email renders the order confirmation and sends it once.
"""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_mail_service, get_settings
from app.schemas.common import ErrorResponse
from app.schemas.email import SendEmailRequest, SendEmailResponse
from app.services.mail_service import MailService, render_order_confirmation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Email"])


@router.post(
    "/send-email",
    response_model=SendEmailResponse,
    responses={
        400: {"description": "Invalid recipient or order payload", "model": ErrorResponse},
        500: {"description": "Mail provider error", "model": ErrorResponse},
    },
    summary="Send an order confirmation email",
)
async def send_email(
    body: SendEmailRequest,
    mailer: MailService = Depends(get_mail_service),
    settings=Depends(get_settings),
) -> SendEmailResponse:
    html = render_order_confirmation(
        order_id=body.order_id,
        items=[item.model_dump() for item in body.items],
        currency=body.currency,
        total=body.total,
        customer_name=body.customer_name,
    )
    subject = body.subject or f"{settings.order_email_subject} #{body.order_id}"
    logger.info("Order email for %s (%d item(s))", body.order_id, len(body.items))
    message_id = await mailer.send(to=body.to, subject=subject, html=html)
    return SendEmailResponse(message="Email sent successfully", id=message_id)
