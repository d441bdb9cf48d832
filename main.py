from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from structlog import get_logger
from structlog.contextvars import bind_contextvars, unbind_contextvars

from core.errors import ErrorCode
from core.logging_config import setup_logging
from core.response_envelope import (
    apply_response_documentation,
    document_response,
    error_response,
    http_exception_response,
)
from core.settings import GOOGLE_MAPS_API_KEY_ENV, get_settings

settings = get_settings()
setup_logging(settings)
logger = get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parent

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            unbind_contextvars("request_id")
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp permissive CORS headers on every response, errors included."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response


app = FastAPI(title="Walkable Clinics API")
app.add_middleware(CorsHeadersMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(RequestIdMiddleware)
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static"), html=True), name="static")


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    return http_exception_response(exc=exc)


@app.exception_handler(RequestValidationError)
async def custom_validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status_code=400, error="invalid_request")


@app.exception_handler(Exception)
async def custom_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", path=request.url.path)
    detail = str(exc) if (settings.debug_include_error_details and not settings.is_production) else None
    return error_response(
        status_code=500,
        error=ErrorCode.SERVER_ERROR.value,
        detail=detail,
        headers=dict(CORS_HEADERS),
    )


@app.get("/health", tags=["Health"])
@document_response(
    success_example={
        "status": "healthy",
        "timestamp": "2024-06-03T10:00:00+00:00",
        "services": {"places": {"status": "healthy", "message": "Places API key configured"}},
    },
)
async def health_check():
    services: dict[str, dict[str, str]] = {}
    overall_status = "healthy"

    if settings.google_maps_api_key:
        services["places"] = {"status": "healthy", "message": "Places API key configured"}
    else:
        overall_status = "degraded"
        services["places"] = {
            "status": "unhealthy",
            "message": f"missing_env_{GOOGLE_MAPS_API_KEY_ENV}",
        }

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }


# --- auto-routes-start ---
from api.v1.hospital_route import router as v1_hospital_route_router

app.include_router(v1_hospital_route_router, prefix='/v1')
# --- auto-routes-end ---

apply_response_documentation(app)
