# Middleware package init
"""
Docs Wallet Backend — Middleware Package
=========================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route

Route-level gate:
    access_guard.require_claim is a FastAPI dependency rather than ASGI
    middleware, so public routes (/, /health, /jwt, /users) opt out simply
    by not declaring it.
"""
