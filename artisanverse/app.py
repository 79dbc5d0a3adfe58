import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from artisanverse import __version__
from artisanverse.core.config import Settings, get_settings
from artisanverse.core.logging_setup import setup_logging
from artisanverse.core.rate_limiter import RateLimiter
from artisanverse.core.utils import generate_response, utc_now_iso
from artisanverse.repositories.json_storage import (
    CollectionNotFoundError,
    DuplicateRecordError,
    PersistenceError,
    RecordNotFoundError,
    RecordStore,
)
from artisanverse.routers import artisans as artisans_router
from artisanverse.routers import products as products_router
from artisanverse.routers import stats as stats_router
from artisanverse.routers import workshops as workshops_router
from artisanverse.services.artisan_service import ArtisanService
from artisanverse.services.errors import MarketplaceError
from artisanverse.services.order_service import OrderService
from artisanverse.services.product_service import ProductService
from artisanverse.services.user_service import UserService
from artisanverse.services.workshop_service import WorkshopService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data: https: http:; "
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
            "font-src 'self' https://fonts.gstatic.com; "
            "script-src 'self'; "
            "connect-src 'self' ws: wss:",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(generate_response(False, None, message, **extra), status_code=status_code)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MarketplaceError)
    async def marketplace_error(request: Request, exc: MarketplaceError):
        return _error(exc.status_code, exc.message, error=exc.code)

    @app.exception_handler(RecordNotFoundError)
    async def record_not_found(request: Request, exc: RecordNotFoundError):
        return _error(404, str(exc), error="not_found")

    @app.exception_handler(DuplicateRecordError)
    async def duplicate_record(request: Request, exc: DuplicateRecordError):
        return _error(409, str(exc), error="duplicate")

    @app.exception_handler(CollectionNotFoundError)
    async def collection_not_found(request: Request, exc: CollectionNotFoundError):
        logger.error("Unknown collection requested: %s", exc.collection)
        return _error(500, "Internal server error", error="collection_not_found")

    @app.exception_handler(PersistenceError)
    async def persistence_error(request: Request, exc: PersistenceError):
        return _error(503, "Storage temporarily unavailable", error="persistence")


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Factory compatible with `uvicorn artisanverse.app:create_app --factory`."""
    settings = settings or get_settings()
    if store is None:
        store = RecordStore(settings.data_dir)
        store.initialize()

    app = FastAPI(title="Artisanverse API", version=__version__)
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.store = store
    app.state.rate_limiter = RateLimiter()
    app.state.user_service = UserService(store)
    app.state.product_service = ProductService(store)
    app.state.artisan_service = ArtisanService(store)
    app.state.order_service = OrderService(store, tax_rate=settings.tax_rate)
    app.state.workshop_service = WorkshopService(store)

    allowed_cors = {settings.client_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000"})
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {
            "status": "OK",
            "timestamp": utc_now_iso(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
            "environment": settings.app_env,
            "version": __version__,
            "collections": list(store.collections),
        }

    app.include_router(products_router.router)
    app.include_router(artisans_router.router)
    app.include_router(stats_router.router)
    app.include_router(workshops_router.router)
    return app


def main() -> None:
    import uvicorn

    setup_logging()
    uvicorn.run("artisanverse.app:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
