# Middleware package init
"""
PerkBoard Backend - Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [Session] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any processing
    2. Request ID: correlation ID for every later log line
    3. Logging: method, path, status and duration with the request ID
    4. Session: decodes the signed cookie into request.session
    5. GZip / CORS: FastAPI built-ins
"""
