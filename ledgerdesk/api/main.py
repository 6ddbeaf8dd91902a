from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from ledgerdesk.api.routes_customers import router as customers_router
from ledgerdesk.api.routes_dashboard import router as dashboard_router
from ledgerdesk.api.routes_fx import router as fx_router
from ledgerdesk.api.routes_health import router as health_router
from ledgerdesk.api.routes_ids import router as ids_router
from ledgerdesk.api.routes_invoices import router as invoices_router
from ledgerdesk.api.routes_products import router as products_router
from ledgerdesk.api.routes_quotes import router as quotes_router
from ledgerdesk.api.routes_settings import router as settings_router
from ledgerdesk.core.config import settings
from ledgerdesk.core.errors import register_error_handlers
from ledgerdesk.core.logger import init_logging
from ledgerdesk.core.monitoring import init_monitoring


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):  # type: ignore[override]
        response = await call_next(request)
        response.headers.setdefault("Referrer-Policy", "same-origin")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        return response


def create_app() -> FastAPI:
    init_logging()
    init_monitoring()

    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    register_error_handlers(app)
    app.include_router(fx_router, prefix="/api/fx")
    app.include_router(ids_router, prefix="/api/ids")
    app.include_router(customers_router, prefix="/customers")
    app.include_router(products_router, prefix="/products")
    app.include_router(invoices_router, prefix="/invoices")
    app.include_router(quotes_router, prefix="/quotes")
    app.include_router(settings_router, prefix="/settings")
    app.include_router(dashboard_router, prefix="/dashboard")
    app.include_router(health_router)
    return app


app = create_app()
