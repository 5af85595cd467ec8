# Middleware package init
"""
Events BFF — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Session] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line, including outgoing API calls,
       carries the correlation ID
    2. Logging: captures status and duration of the whole request
    3. Session: decodes the signed session cookie for the route dependencies
    4. GZip / CORS: applied by Starlette's built-in middleware
"""
