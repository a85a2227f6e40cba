"""
PixelPilot Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Rate limit runs first so throttled callers never reach the AI provider
    - Request ID is set before logging so access lines carry it
"""
