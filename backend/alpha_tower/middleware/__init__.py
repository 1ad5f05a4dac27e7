# Middleware package init
"""
Alpha Tower Backend — Middleware Package
==========================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log record
    emitted while handling the request can carry the same id.
"""
