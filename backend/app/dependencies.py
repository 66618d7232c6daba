"""
VendorBridge Backend — Dependency Wiring
==========================================

What:  FastAPI dependencies that hand the process-scoped collaborators to
       route handlers.
How:   create_app()/lifespan put the clients on `app.state`; these functions
       read them back per request. A collaborator that could not be built
       (missing credentials) surfaces as a ProviderError (500) on the
       endpoints that need it, while the rest of the API keeps working.
"""

from fastapi import Depends, Request

from app.exceptions import ProviderError
from app.services.avatar_keys import AvatarKeys
from app.services.avatar_service import AvatarService
from app.services.file_service import FileService
from app.services.mail_service import MailService
from app.services.payment_service import PaymentService
from app.services.storage_service import StorageService


def _require(request: Request, attr: str, provider: str, hint: str):
    client = getattr(request.app.state, attr, None)
    if client is None:
        raise ProviderError(provider, f"{provider.capitalize()} is not configured. {hint}")
    return client


def get_settings(request: Request):
    return request.app.state.settings


def get_storage_service(request: Request) -> StorageService:
    return _require(request, "storage", "storage", "Set SUPABASE_URL and SUPABASE_KEY.")


def get_payment_service(request: Request) -> PaymentService:
    return _require(request, "payments", "payment", "Set STRIPE_SECRET_KEY.")


def get_mail_service(request: Request) -> MailService:
    return _require(request, "mailer", "mail", "Set RESEND_API_KEY.")


def get_avatar_keys(request: Request) -> AvatarKeys:
    return request.app.state.avatar_keys


def get_avatar_service(
    storage: StorageService = Depends(get_storage_service),
    keys: AvatarKeys = Depends(get_avatar_keys),
    settings=Depends(get_settings),
) -> AvatarService:
    return AvatarService(storage=storage, keys=keys, files=FileService(settings.max_file_size))
