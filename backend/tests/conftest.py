"""
VendorBridge Backend — Test Configuration (conftest.py)
=========================================================

Shared fixtures. No test talks to Stripe, Supabase or Resend: the app is
built with in-memory fakes injected through create_app().

Fixtures:
    ├── test_settings:  Settings isolated from the process environment and .env
    ├── fixed_clock:    Deterministic unix-millis clock for key generation
    ├── fake_storage:   In-memory stand-in for StorageService
    ├── fake_payments:  Records PaymentIntent requests
    ├── fake_mailer:    Records sent emails
    ├── sample_image_bytes: Minimal JPEG
    ├── sample_png_bytes:   Minimal PNG
    └── test_client:    httpx AsyncClient bound to a fresh app
"""

import os
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ["LOG_LEVEL"] = "WARNING"

from app.config import Settings  # noqa: E402
from app.exceptions import ProviderError  # noqa: E402
from app.services.avatar_keys import StoredObject  # noqa: E402
from app.services.payment_service import PaymentIntentResult  # noqa: E402

PUBLIC_BASE = "https://cdn.test/storage/v1/object/public/profiles"


class FakeStorage:
    """In-memory bucket with the StorageService call surface."""

    def __init__(self):
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.calls: List[tuple] = []
        self.fail_with: Optional[str] = None

    def _check(self):
        if self.fail_with:
            raise ProviderError("storage", self.fail_with)

    def put(self, key: str, content: bytes = b"img", content_type: str = "image/jpeg"):
        self.objects[key] = (content, content_type)

    async def upload(self, key, content, content_type, overwrite=False):
        self.calls.append(("upload", key, overwrite))
        self._check()
        if key in self.objects and not overwrite:
            raise ProviderError("storage", "The resource already exists")
        self.objects[key] = (content, content_type)

    async def remove(self, keys):
        self.calls.append(("remove", list(keys)))
        self._check()
        for key in keys:
            self.objects.pop(key, None)

    async def list(self, prefix, search=None):
        self.calls.append(("list", prefix))
        self._check()
        folder = prefix.strip("/") + "/"
        return [
            StoredObject.from_name(key, content_type=ctype, size=len(content))
            for key, (content, ctype) in sorted(self.objects.items())
            if key.startswith(folder) and "/" not in key[len(folder):]
            and (search is None or key[len(folder):].startswith(search))
        ]

    async def exists(self, key):
        self._check()
        return key in self.objects

    def get_public_url(self, key):
        return f"{PUBLIC_BASE}/{key}"


class FakePayments:
    def __init__(self):
        self.requests: List[dict] = []
        self.fail_with: Optional[str] = None

    async def create_payment_intent(self, amount, currency, automatic_payment_methods=True):
        self.requests.append(
            {"amount": amount, "currency": currency, "automatic": automatic_payment_methods}
        )
        if self.fail_with:
            raise ProviderError("payment", self.fail_with)
        return PaymentIntentResult(id="pi_123", client_secret="pi_123_secret_abc")


class FakeMailer:
    def __init__(self):
        self.sent: List[dict] = []
        self.fail_with: Optional[str] = None

    async def send(self, to, subject, html):
        if self.fail_with:
            raise ProviderError("mail", self.fail_with)
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"email_{len(self.sent)}"


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        stripe_secret_key="sk_test_123",
        supabase_url="https://project.supabase.test",
        supabase_key="service-key",
        bucket_name="profiles",
        resend_api_key="re_test_123",
        mail_from="Shop <orders@shop.test>",
        max_file_size=1024 * 1024,
        log_level="WARNING",
    )


@pytest.fixture
def fixed_clock():
    return lambda: 1_700_000_000_000


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def fake_payments():
    return FakePayments()


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI + JFIF APP0 header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_png_bytes():
    """PNG signature + IHDR chunk for a 1x1 RGBA image."""
    return (
        b'\x89PNG\r\n\x1a\n'
        b'\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00'
        b'\x1f\x15\xc4\x89'
    )


@pytest.fixture
def api_app(test_settings, fake_storage, fake_payments, fake_mailer):
    from app.main import create_app
    return create_app(
        settings=test_settings,
        storage=fake_storage,
        payments=fake_payments,
        mailer=fake_mailer,
    )


@pytest_asyncio.fixture
async def test_client(api_app):
    """ASGITransport does not run the lifespan; collaborators are already injected."""
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
