"""
SalesDesk Backend — Health Check & API Index Routes
====================================================

What:  GET /health (liveness + database probe) and GET / (endpoint index).
Why:   Load balancers and container health checks need an unauthenticated
       endpoint that says whether this instance can serve traffic.
How:   /health runs `SELECT 1` through the app's Database.

Status levels:
    200  database reachable                 {"success": true,  "database": "connected"}
    503  database unreachable or timed out  {"success": false, "database": "disconnected"}
"""

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from salesdesk import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level so uptime counts from first import
_start_time = time.time()

DB_PING_TIMEOUT_SECONDS = 3.0

ENDPOINTS = {
    "health": "GET /health",
    "auth": {
        "register": "POST /auth/register",
        "login": "POST /auth/login",
        "profile": "GET /auth/profile (requires token)",
        "updateProfile": "PUT /auth/profile (requires token)",
        "changePassword": "PUT /auth/change-password (requires token)",
        "delete": "DELETE /auth/:id (requires token)",
    },
    "companies": {
        "getAll": "GET /company",
        "getById": "GET /company/:id",
        "create": "POST /company",
        "update": "PUT /company/:id",
        "delete": "DELETE /company/:id",
        "stats": "GET /company/stats",
        "bulkDelete": "POST /company/bulk-delete",
    },
    "items": {
        "getAll": "GET /item",
        "getById": "GET /item/:id",
        "create": "POST /item",
        "update": "PUT /item/:id",
        "delete": "DELETE /item/:id",
        "stats": "GET /item/stats",
        "getByHsnCode": "GET /item/hsn/:hsnCode",
        "bulkDelete": "POST /item/bulk-delete",
    },
    "sales": {
        "getAll": "GET /sales",
        "getById": "GET /sales/:id",
        "create": "POST /sales",
        "update": "PUT /sales/:id",
        "delete": "DELETE /sales/:id",
    },
}


@router.get("/", summary="API index")
async def api_index() -> dict:
    return {
        "success": True,
        "message": "SalesDesk API",
        "version": __version__,
        "endpoints": ENDPOINTS,
    }


@router.get(
    "/health",
    summary="Service health check",
    responses={503: {"description": "Database unreachable"}},
)
async def health_check(request: Request) -> JSONResponse:
    """
    Liveness plus a lightweight database probe.

    The ping is bounded by a timeout so a hung pool cannot hang the probe.
    """
    db_status = "connected"
    try:
        await asyncio.wait_for(request.app.state.database.ping(), DB_PING_TIMEOUT_SECONDS)
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", type(e).__name__)

    healthy = db_status == "connected"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "success": healthy,
            "message": "Server is running" if healthy else "Database unavailable",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "database": db_status,
            "uptimeSeconds": round(time.time() - _start_time, 2),
        },
    )
