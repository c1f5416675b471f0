"""
Security Headers Middleware

The API only ever returns JSON (plus the interactive docs when enabled),
so the policy is locked down to nothing but what the docs page needs.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from core.config import settings

DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")

# JSON responses never load anything
API_CSP = "default-src 'none'; frame-ancestors 'none'"

# Swagger UI / ReDoc pull their bundles from the jsDelivr CDN
DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https://fastapi.tiangolo.com; "
    "frame-ancestors 'none'"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to all responses.

    Athlete snapshots are personal data: responses are never cached by
    intermediaries, and HSTS/CSP are added outside DEBUG.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cache-Control"] = "no-store"

        if not settings.DEBUG:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
            is_docs = request.url.path.startswith(DOCS_PATHS)
            response.headers["Content-Security-Policy"] = DOCS_CSP if is_docs else API_CSP

        return response
