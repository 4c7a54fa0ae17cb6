# Middleware package init
"""
Hidden Gems Backend — Middleware Package
=========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID available to everything downstream
    2. Logging: access line with status and duration, tagged with the ID
    3. GZip: compresses responses of 500 bytes or more
    4. CORS: Starlette's CORSMiddleware answers preflight requests

    Responses unwind in reverse, so the X-Request-ID header is attached last.
"""
