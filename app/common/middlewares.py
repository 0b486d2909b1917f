# app/common/middlewares.py
from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.common.logging_setup import get_correlation_id, get_logger, set_correlation_id

logger = get_logger("access")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        # Reaproveita X-Request-Id do cliente (ex.: app do scanner), senão gera UUID
        set_correlation_id(request.headers.get("X-Request-Id"))
        inicio = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Request-Id"] = get_correlation_id()
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"duration_ms": round((time.perf_counter() - inicio) * 1000, 1)},
        )
        return response
