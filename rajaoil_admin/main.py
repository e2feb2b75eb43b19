from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from rajaoil_admin.auth import require_admin_auth
from rajaoil_admin.config import FRONTEND_URL, LOG_LEVEL
from rajaoil_admin.routes import auth, catalog, contact_forms, media, orders

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

ENDPOINTS = {
    "orders": "/api/admin/orders",
    "products": "/api/admin/products",
    "brands": "/api/admin/brands",
    "categories": "/api/admin/categories",
    "contact_forms": "/api/admin/contact-forms",
    "media": "/api/admin/media",
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    location = ".".join(str(part) for part in errors[0].get("loc", ())) if errors else ""
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"{location}: {message}" if location else message},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Raja Oil Admin API",
        description="Admin API for the Raja Oil catalog, orders, contact forms and media",
        version="1.0.0",
    )

    allowed_origins = [origin.strip() for origin in FRONTEND_URL.split(",") if origin.strip()]
    # the "*" wildcard cannot be combined with credentials
    allow_credentials = "*" not in allowed_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    admin_only = [Depends(require_admin_auth)]

    app.include_router(auth.router, prefix="/api/admin/auth", tags=["admin-auth"])
    app.include_router(orders.router, prefix="/api/admin/orders", tags=["orders"], dependencies=admin_only)
    app.include_router(catalog.router, prefix="/api/admin", tags=["catalog"], dependencies=admin_only)
    app.include_router(
        contact_forms.router, prefix="/api/admin/contact-forms", tags=["contact-forms"], dependencies=admin_only
    )
    app.include_router(media.router, prefix="/api/admin/media", tags=["media"], dependencies=admin_only)
    app.include_router(media.public_router, prefix="/api/media", tags=["media"])

    @app.get("/")
    async def root():
        return {"message": "Raja Oil Admin API", "status": "healthy", "endpoints": ENDPOINTS}

    @app.get("/api")
    async def api_root():
        return {"message": "Raja Oil Admin API", "status": "healthy", "endpoints": ENDPOINTS}

    return app


app = create_app()
