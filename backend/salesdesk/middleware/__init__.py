"""
SalesDesk Backend — Middleware Package
=======================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    1. Request ID first: every later log line can be correlated.
    2. Access log: measures the full handler duration and final status,
       including responses produced by the exception handlers.
    3. CORS: FastAPI's CORSMiddleware (answers preflight requests).
"""
