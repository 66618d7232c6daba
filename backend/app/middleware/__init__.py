# Middleware package init
"""
VendorBridge Backend — Middleware Package
===========================================

Request path (outermost first):
    [Request ID] → [Access Log] → [GZip] → [CORS] → route handler

The request id is assigned before the access log line is written, so every
log line and error body for one request carries the same id.
"""
