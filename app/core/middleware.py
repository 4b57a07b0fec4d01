"""Middleware de performance, rastreio e segurança"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from time import perf_counter
import logging
import uuid

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0


class OptimizedMiddleware(BaseHTTPMiddleware):
    """Middleware combinado para performance e segurança"""

    async def dispatch(self, request: Request, call_next):
        start_time = perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)

        process_time = perf_counter() - start_time

        # Headers de performance e rastreio
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        response.headers["X-Request-ID"] = request_id

        # Headers de segurança
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Requisição lenta [{request_id}]: {request.method} {request.url.path} "
                f"levou {process_time:.4f}s"
            )
        elif response.status_code >= 500:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} -> {response.status_code}"
            )

        return response
