"""
VendorBridge Backend — Payment Schemas
========================================

Request/response contract for POST /api/create-payment-intent. Field names
match what the frontend's Stripe.js checkout already sends and reads.
"""

from pydantic import BaseModel, Field, field_validator


class PaymentIntentRequest(BaseModel):
    """
    amount:   Integer amount in the currency's minor unit (e.g. cents)
    currency: ISO 4217 code, any case
    """
    amount: int = Field(gt=0, description="Amount in minor units (e.g. 1999 = $19.99)")
    currency: str = Field(min_length=3, max_length=3, description="ISO currency code, e.g. usd")

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("currency must be a three-letter code")
        return v.lower()


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(
        serialization_alias="clientSecret",
        description="Secret the frontend passes to stripe.confirmPayment",
    )
