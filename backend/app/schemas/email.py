"""
VendorBridge Backend — Order Email Schemas
============================================

Request/response contract for POST /api/send-email.

Example request:
    {
        "to": "ana@example.com",
        "customerName": "Ana",
        "orderId": "A-1001",
        "currency": "usd",
        "items": [{"name": "Mug", "quantity": 2, "price": 9.5}]
    }
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class OrderItem(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    quantity: int = Field(default=1, ge=1)
    price: float = Field(ge=0, description="Unit price in major units")


class SendEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: EmailStr = Field(description="Recipient address")
    order_id: str = Field(alias="orderId", min_length=1)
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    items: List[OrderItem] = Field(default_factory=list)
    total: Optional[float] = Field(
        default=None,
        ge=0,
        description="Order total; computed from items when omitted",
    )
    currency: str = Field(default="usd", min_length=3, max_length=3)
    subject: Optional[str] = Field(default=None, max_length=200)


class SendEmailResponse(BaseModel):
    message: str
    id: str = Field(description="Provider message id")
