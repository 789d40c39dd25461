# Middleware package init
"""
ComfortMap Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Correlation ID for every log line of the request
    2. Logging: Method, path, status and duration, tagged with the request ID
"""
