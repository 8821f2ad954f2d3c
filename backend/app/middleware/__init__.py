# Middleware package init
"""
Benefícios API: Middleware Package
===================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the logging middleware (and every log line the
    handler writes) can read the ID from the ContextVar.
"""
