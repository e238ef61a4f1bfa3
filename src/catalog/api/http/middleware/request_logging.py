"""Request logging for the HTTP layer.

Every request runs inside a loguru context carrying its request id, so log
lines written by the router, the service or the repository can be traced back
to the request that caused them. Exceptions that reach this point (a store
fault while listing, or a bug) are logged and answered with a generic 500.
"""

from __future__ import annotations

import re
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.responses import JSONResponse

from src.catalog.core.result import StoreError

REQUEST_ID_HEADER = "X-Request-ID"

_PRODUCT_PATH = re.compile(r"^/products/(?P<product_id>[^/]+)/?$")


def _request_context(request: Request, request_id: str) -> dict[str, str]:
    context = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
    }
    match = _PRODUCT_PATH.match(request.url.path)
    if match:
        context["product_id"] = match.group("product_id")
    return context


def _internal_error(request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "request_id": request_id},
        headers={REQUEST_ID_HEADER: request_id},
    )


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    start = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - start) * 1000, 1)

    with logger.contextualize(**_request_context(request, request_id)):
        try:
            response = await call_next(request)
        except StoreError as exc:
            logger.bind(
                operation=exc.fault.operation, duration_ms=elapsed_ms()
            ).error(
                "{} {} failed in the store: {}",
                request.method,
                request.url.path,
                exc.fault.cause,
            )
            return _internal_error(request_id)
        except Exception:
            logger.bind(duration_ms=elapsed_ms()).exception(
                "{} {} raised", request.method, request.url.path
            )
            return _internal_error(request_id)

        logger.bind(status_code=response.status_code, duration_ms=elapsed_ms()).info(
            "{} {} -> {}", request.method, request.url.path, response.status_code
        )
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
