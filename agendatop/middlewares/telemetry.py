from __future__ import annotations

import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from agendatop.core.logging import clear_request_context, get_logger, set_request_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """request_id por requisição (ecoado em X-Request-ID) + log de início/fim."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        clear_request_context()
        rid = set_request_id(request.headers.get("X-Request-ID"))

        log = get_logger().bind(path=request.url.path, method=request.method)
        log.info("request.start")

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "request.error",
                duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
            )
            raise

        response.headers["X-Request-ID"] = rid
        log.info(
            "request.end",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
        )
        return response
