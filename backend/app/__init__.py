"""
VendorBridge Backend — Application Package
============================================

A thin HTTP layer over three vendors: Stripe (payment intents), Supabase
Storage (profile avatars) and Resend (order confirmation emails).

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (avatar keys, orchestr.) │  ← naming scheme, validation
    ├─────────────────────────────────────┤
    │     Gateways (vendor SDK wrappers)  │  ← storage, payment, mail
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
