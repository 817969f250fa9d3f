"""
Camunda Connector — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route

    1. Request ID first: every later log line can be correlated
    2. Logging: measures duration and records the final status

    Responses pass back through in reverse, so the X-Request-ID header is
    attached after the access log line is written.
"""
