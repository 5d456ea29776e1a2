import time
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from config import logger

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_client_id(request: Request) -> str:
    """Best-effort caller identity for rate limiting, honouring proxy headers."""
    if client_ip := request.headers.get("cf-connecting-ip"):
        return client_ip.strip()
    if forwarded := request.headers.get("x-forwarded-for"):
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_request_id() -> Optional[str]:
    return request_id_var.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and logs its outcome and latency."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        client = get_client_id(request)
        started = time.perf_counter()

        logger.info(
            "%s %s started", request.method, request.url.path,
            extra={"request_id": request_id, "client": client}
        )
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        elapsed = time.perf_counter() - started
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "%s %s -> %s in %.1fms", request.method, request.url.path,
            response.status_code, elapsed * 1000,
            extra={"request_id": request_id, "client": client}
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        return response
