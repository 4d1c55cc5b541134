# Middleware package init
"""
MarkNotes Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route

    1. Request ID first so every later layer, the 429 body included, can
       report the correlation id
    2. Rate Limit rejects abusive clients before any route work
    3. Logging records status and duration with the request id
"""
