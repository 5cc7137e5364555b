"""Response hardening, compression and access logging for every request."""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="access")

GZIP_MINIMUM_SIZE = 1000

# Same header set helmet applies by default, minus Content-Security-Policy
# (the site embeds third-party players).
SECURITY_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


async def add_security_headers(request: Request, call_next):
    """Attach SECURITY_HEADERS without clobbering headers a route set itself."""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


async def log_requests(request: Request, call_next):
    """One compact line per request: method, url, status, length, duration."""
    start_time = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start_time) * 1000

    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    length = response.headers.get("content-length", "-")
    logger.info(f"{request.method} {url} {response.status_code} {length} - {duration_ms:.3f} ms")
    return response


def install_middleware(app: FastAPI) -> None:
    """Register middleware; the access log is outermost so it times everything."""
    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.middleware("http")(add_security_headers)
    app.middleware("http")(log_requests)
