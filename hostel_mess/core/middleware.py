"""
HTTP middleware: request ids and one access-log line per request.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hostel_mess.core.logging import get_access_logger, request_id as request_id_var

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Reuse the caller's ``X-Request-ID`` or mint one, expose it on
    ``request.state`` and in the logging context, and echo it back.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get(self.header_name) or uuid.uuid4().hex
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[self.header_name] = rid
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Time each request, add ``X-Process-Time`` and log the outcome.

    Exceptions that escape the handlers are logged with traceback and
    re-raised.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        log = get_access_logger().bind(
            request_id=getattr(request.state, "request_id", None),
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise

        duration_ms = _elapsed_ms(started)
        response.headers["X-Process-Time"] = f"{duration_ms / 1000:.4f}"
        if response.status_code >= 500:
            log.error("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        elif response.status_code >= 400:
            log.warning("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        else:
            log.info("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def register_middlewares(app: FastAPI) -> None:
    # Added last runs first: the request id is set before the access log binds it.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)


__all__ = ["RequestIDMiddleware", "AccessLogMiddleware", "register_middlewares"]
