import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware

from portfolio_api.core.config import Settings, get_settings
from portfolio_api.core.logging_setup import configure_logging
from portfolio_api.core.rate_limiter import RateLimitExceeded, RateLimiter
from portfolio_api.routers import collections as collections_router
from portfolio_api.services.collection_service import CollectionService

logger = logging.getLogger(__name__)

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com https://cdn.tailwindcss.com; "
    "script-src 'self' 'unsafe-inline' https://unpkg.com https://cdn.tailwindcss.com; "
    "img-src 'self' data: https:; "
    "font-src 'self' https://fonts.gstatic.com; "
    "connect-src 'self'"
)
TOO_LARGE_MESSAGE = "Request entity too large"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class _BodyTooLarge(Exception):
    pass


class BodySizeLimitMiddleware:
    """Reject request bodies above ``max_bytes`` (declared or streamed) with 413."""

    def __init__(self, app, *, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        too_large = JSONResponse({"success": False, "message": TOO_LARGE_MESSAGE}, status_code=413)
        declared = Headers(scope=scope).get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            await too_large(scope, receive, send)
            return

        received = 0
        started = False

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise _BodyTooLarge()
            return message

        async def tracking_send(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except _BodyTooLarge:
            if started:
                raise
            await too_large(scope, receive, send)


class CachedStaticFiles(StaticFiles):
    def __init__(self, *args, max_age: int, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.max_age = max_age

    def file_response(self, *args, **kwargs):
        resp = super().file_response(*args, **kwargs)
        resp.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        return resp


def _cors_origins(settings: Settings) -> list[str]:
    if settings.is_prod:
        return [settings.cors_origin] if settings.cors_origin else []
    return ["*"]


def create_app(settings: Settings | None = None, service: CollectionService | None = None) -> FastAPI:
    """Build the API; compativel com uvicorn/gunicorn (``--factory`` ou ``portfolio_api.app:app``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        svc = service or CollectionService.from_settings(settings)
        app.state.collection_service = svc
        try:
            yield
        finally:
            svc.close()
            app.state.collection_service = None

    app = FastAPI(title="Portfolio Collections API", lifespan=lifespan)
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter()
    app.state.collection_service = None

    @app.exception_handler(RateLimitExceeded)
    async def _rate_limited(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            {"success": False, "message": str(exc)},
            status_code=429,
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.get("/healthz")
    def healthz(request: Request):
        svc = request.app.state.collection_service
        counts = svc.counts() if svc else {}
        return {"ok": svc is not None, "backend": settings.storage_backend, "collections": counts}

    app.include_router(collections_router.router)

    if settings.static_dir.is_dir():
        app.mount(
            "/",
            CachedStaticFiles(directory=settings.static_dir, html=True, max_age=settings.static_max_age),
            name="static",
        )
    else:
        logger.info("Static directory %s not found; static files disabled", settings.static_dir)

    # add_middleware wraps: the last one added runs first
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.is_prod)
    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    return app


_default_app: FastAPI | None = None


def __getattr__(name: str):
    # ``uvicorn portfolio_api.app:app`` builds the default app on first access
    global _default_app
    if name == "app":
        if _default_app is None:
            _default_app = create_app()
        return _default_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
