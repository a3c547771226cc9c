"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from product_validator.config import settings
from product_validator.utils.logging import setup_logging, get_logger
from product_validator.api.routes import health, validation

# Setup logging before anything else
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting application", environment=settings.environment)
    yield
    logger.info("Shutting down application")


# Create FastAPI application
app = FastAPI(
    title="Product Validator API",
    description="Classifies store products as matches for a shopping-list ingredient",
    version=settings.api_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if not settings.is_production else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Unreadable request bodies get the same error shape as bad payloads."""
    logger.warning("Unreadable request body", path=request.url.path)
    return JSONResponse(status_code=400, content={"error": "Invalid payload: request body must be JSON"})


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(
    validation.router,
    prefix=f"/api/{settings.api_version}",
    tags=["Validation"]
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Product Validator API",
        "version": settings.api_version,
        "environment": settings.environment,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "product_validator.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
