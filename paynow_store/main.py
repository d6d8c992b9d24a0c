"""
PayNow Store Application

Demo storefront taking payments through the PayNow gateway, by card on the
hosted payment page or by mobile money (EcoCash / OneMoney).
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .routes import products_router, cart_router, payment_router, pages_router
from .services.gateway import GatewayConfigurationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("PayNow Store starting up...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"PayNow configured: {settings.paynow_configured}")
    if not settings.is_production:
        logger.info("Test mode: simulated mobile money scenarios enabled")
    yield
    logger.info("PayNow Store shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="E-commerce storefront integrated with the PayNow payment gateway",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Answer 405s with the same JSON body on every route"""
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content={"message": "Method not allowed"},
            headers=getattr(exc, "headers", None),
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies become a 400 with a readable message"""
    errors = exc.errors()
    parts = []
    for error in errors:
        field = ".".join(str(loc) for loc in error.get("loc", ()) if loc != "body")
        parts.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    message = "; ".join(parts) or "Invalid request"
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@app.exception_handler(GatewayConfigurationError)
async def gateway_configuration_handler(request: Request, exc: GatewayConfigurationError):
    logger.error(f"Payment gateway unavailable: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "message": str(exc)})


# Static files
static_dir = os.path.join(os.path.dirname(__file__), "static")

if os.path.exists(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

# Include routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(payment_router)
app.include_router(pages_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "paynow-store",
        "paynow_configured": settings.paynow_configured,
        "test_mode": not settings.is_production,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "paynow_store.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
