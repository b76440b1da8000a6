"""
Health Diary Backend — Middleware Package
==========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so every access-log line and every error body
    carries the same correlation ID.
"""
