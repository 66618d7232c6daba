# Routes package init
"""
VendorBridge Backend — API Routes Package
===========================================

Route Inventory:
    - payments.py:  POST   /api/create-payment-intent
    - profile.py:   POST   /api/profile/upload
                    GET    /api/profile/image/{userId}
                    PUT    /api/profile/update
                    DELETE /api/profile/delete/{userId}
                    GET    /api/profile/all-files
                    GET    /api/profile/latest-image/{originalName}
    - email.py:     POST   /api/send-email
    - health.py:    GET    /health

Routes stay thin: pull data out of the request, call a service, return a
schema. Errors are raised, never formatted here; main.py's handlers own
the error body.
"""
