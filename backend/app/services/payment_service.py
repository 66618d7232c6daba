"""
VendorBridge Backend — Stripe Payment Gateway
===============================================

What:  Creates Stripe PaymentIntents and hands back the client secret.
Why:   The frontend confirms the payment with Stripe.js; the backend only
       needs to create the intent with the secret key it holds.
How:   Calls the stripe SDK with an explicit per-call API key (no global
       `stripe.api_key` mutation), inside Starlette's threadpool.

Amount semantics (minor units, currency rules, payment methods) belong to
Stripe; this gateway does not second-guess them.
"""

import logging
from dataclasses import dataclass

import stripe
from starlette.concurrency import run_in_threadpool

from app.exceptions import ProviderError

logger = logging.getLogger(__name__)

PROVIDER = "payment"


@dataclass(frozen=True)
class PaymentIntentResult:
    id: str
    client_secret: str


class PaymentService:
    """
    Args:
        api_key: Stripe secret key used for every request from this instance
    """

    def __init__(self, api_key: str):
        self.api_key = api_key

    @classmethod
    def from_settings(cls, settings) -> "PaymentService":
        if not settings.payments_configured:
            raise ProviderError(PROVIDER, "Payments are not configured. Set STRIPE_SECRET_KEY.")
        logger.info("PaymentService initialized")
        return cls(settings.stripe_secret_key)

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        automatic_payment_methods: bool = True,
    ) -> PaymentIntentResult:
        """
        Create a PaymentIntent.

        Args:
            amount:   Amount in the currency's minor unit (cents for USD)
            currency: Three-letter ISO code, lowercase as Stripe expects
            automatic_payment_methods: Let Stripe pick methods from the dashboard

        Raises:
            ProviderError: Stripe rejected the request or was unreachable
        """
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                api_key=self.api_key,
                amount=amount,
                currency=currency.lower(),
                automatic_payment_methods={"enabled": automatic_payment_methods},
            )
        except Exception as e:
            # StripeError.user_message is the customer-safe text when present
            message = getattr(e, "user_message", None) or str(e)
            logger.error("Stripe PaymentIntent creation failed: %s", e)
            raise ProviderError(
                PROVIDER,
                message,
                context={"amount": amount, "currency": currency, "error_type": type(e).__name__},
            )

        logger.info("PaymentIntent %s created (%d %s)", intent["id"], amount, currency.lower())
        return PaymentIntentResult(id=intent["id"], client_secret=intent["client_secret"])
