# Services package init
"""
VendorBridge Backend — Services Layer
=======================================

Service Inventory:
    - avatar_keys:      AvatarKey encode/decode, key builders, latest-version resolver
    - avatar_service:   Profile endpoint orchestration over storage + key scheme
    - file_service:     Avatar upload validation (size, extension, content type)
    - storage_service:  Supabase Storage gateway
    - payment_service:  Stripe PaymentIntent gateway
    - mail_service:     Resend gateway and order confirmation template

Gateways are constructed once per process and passed in; nothing here
creates a vendor client at import time.
"""
