"""
VendorBridge Backend — Resend Mail Gateway and Order Confirmation Template
============================================================================

What:  Renders the order-confirmation email and sends it through Resend.
How:   jinja2 renders the HTML (autoescaped, so customer-supplied item names
       cannot inject markup); the resend SDK delivers it. The SDK keeps its
       API key as module state, so the key is set for the call and restored.
Who:   Built once in the application lifespan; called by POST /api/send-email.

Delivery, bounces and retries are Resend's business: one send attempt,
any failure becomes a ProviderError.
"""

import logging
import threading
from decimal import Decimal
from typing import Any, Dict, List, Optional

import resend
from jinja2 import Environment, select_autoescape
from starlette.concurrency import run_in_threadpool

from app.exceptions import ProviderError

logger = logging.getLogger(__name__)

PROVIDER = "mail"

ORDER_CONFIRMATION_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; color: #222;">
    <h2>Thank you for your order{% if customer_name %}, {{ customer_name }}{% endif %}!</h2>
    <p>Order <strong>{{ order_id }}</strong> has been received.</p>
    {% if items %}
    <table cellpadding="6" cellspacing="0" style="border-collapse: collapse;">
      <tr><th align="left">Item</th><th>Qty</th><th align="right">Price</th></tr>
      {% for item in items %}
      <tr>
        <td>{{ item.name }}</td>
        <td align="center">{{ item.quantity }}</td>
        <td align="right">{{ currency }} {{ "%.2f"|format(item.line_total) }}</td>
      </tr>
      {% endfor %}
    </table>
    {% endif %}
    <p><strong>Total: {{ currency }} {{ "%.2f"|format(total) }}</strong></p>
  </body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))
_order_template = _env.from_string(ORDER_CONFIRMATION_TEMPLATE)

# resend.api_key is process-global; serialize the set/send/restore window
_api_key_lock = threading.Lock()


def render_order_confirmation(
    order_id: str,
    items: List[Dict[str, Any]],
    currency: str,
    total: Optional[float] = None,
    customer_name: Optional[str] = None,
) -> str:
    """
    Render the confirmation HTML.

    Each item needs name, quantity and price; line totals are computed here.
    When `total` is None it is the sum of the line totals.
    """
    rows = []
    for item in items:
        quantity = int(item.get("quantity", 1))
        price = Decimal(str(item.get("price", 0)))
        rows.append(
            {
                "name": item.get("name", "Item"),
                "quantity": quantity,
                "line_total": float(price * quantity),
            }
        )
    if total is None:
        total = sum(row["line_total"] for row in rows)
    return _order_template.render(
        order_id=order_id,
        items=rows,
        currency=currency.upper(),
        total=float(total),
        customer_name=customer_name,
    )


class MailService:
    """
    Args:
        api_key: Resend API key
        sender:  "From" header, e.g. "Shop <orders@shop.example>"
    """

    def __init__(self, api_key: str, sender: str):
        self.api_key = api_key
        self.sender = sender

    @classmethod
    def from_settings(cls, settings) -> "MailService":
        if not settings.mail_configured:
            raise ProviderError(PROVIDER, "Mail is not configured. Set RESEND_API_KEY.")
        logger.info("MailService initialized with sender=%s", settings.mail_from)
        return cls(settings.resend_api_key, settings.mail_from)

    def _send_sync(self, payload: Dict[str, Any]) -> Any:
        with _api_key_lock:
            previous = getattr(resend, "api_key", None)
            resend.api_key = self.api_key
            try:
                return resend.Emails.send(payload)
            finally:
                resend.api_key = previous

    async def send(self, to: str, subject: str, html: str) -> str:
        """
        Send one HTML email.

        Returns:
            The provider's message id.

        Raises:
            ProviderError: Resend rejected the message or was unreachable
        """
        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        try:
            response = await run_in_threadpool(self._send_sync, payload)
        except Exception as e:
            logger.error("Resend send failed for %s: %s", to, e)
            raise ProviderError(PROVIDER, str(e), context={"to": to})

        message_id = response.get("id") if isinstance(response, dict) else None
        if not message_id:
            logger.error("Resend returned no message id: %r", response)
            raise ProviderError(PROVIDER, f"Unexpected mail provider response: {response!r}")

        logger.info("Email %s sent to %s", message_id, to)
        return message_id
