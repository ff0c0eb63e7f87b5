from __future__ import annotations
import logging
import time
from fastapi import Request
from fastapi.responses import JSONResponse
from rate_limit.limiter import FixedWindowLimiter

logger = logging.getLogger("app.requests")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}

# liveness probes must never be throttled
UNLIMITED_PATHS = {"/health"}


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def log_requests(request: Request, call_next):
    start = time.monotonic()
    path = request.url.path
    logger.info("%s %s - %s", request.method, path, _client_ip(request))
    try:
        response = await call_next(request)
    except Exception:
        ms = int((time.monotonic() - start) * 1000)
        logger.error("%s %s - 500 - %dms", request.method, path, ms)
        raise
    ms = int((time.monotonic() - start) * 1000)
    code = response.status_code
    level = logging.ERROR if code >= 500 else logging.WARNING if code >= 400 else logging.INFO
    logger.log(level, "%s %s - %d - %dms", request.method, path, code, ms)
    return response


async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for k, v in SECURITY_HEADERS.items():
        response.headers.setdefault(k, v)
    return response


def rate_limit(limiter: FixedWindowLimiter):
    async def middleware(request: Request, call_next):
        if request.url.path in UNLIMITED_PATHS:
            return await call_next(request)
        ip = _client_ip(request)
        if not limiter.hit(ip):
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests from this IP, please try again later."},
                headers={"Retry-After": str(limiter.retry_after(ip))},
            )
        return await call_next(request)
    return middleware


def body_size_limit(max_bytes: int):
    async def middleware(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > max_bytes:
            return JSONResponse(
                status_code=413,
                content={"error": "Payload too large", "message": f"Request body exceeds {max_bytes} bytes."},
            )
        return await call_next(request)
    return middleware
