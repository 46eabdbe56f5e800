from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging
import time
from typing import Callable
from contextlib import asynccontextmanager
from fastapi.routing import APIRoute

from churchfinder.core.config import settings
from churchfinder.core.logging_config import setup_logging
from churchfinder.api.api import api_router
from churchfinder.core.database import db

setup_logging()
logger = logging.getLogger(__name__)

def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique ID for API routes"""
    tag = route.tags[0] if route.tags else "default"
    return f"{tag}-{route.name}"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle startup and shutdown events for the application
    """
    logger.info("Starting up application...")

    db.init_app()

    if await db.check_connection():
        logger.info("Successfully connected to database")
    else:
        logger.error("Failed to connect to database")
        raise RuntimeError("Database connection failed")

    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API path: {settings.API_PREFIX}")
    logger.info(f"Backend CORS origins: {settings.all_cors_origins}")

    yield  # Server is running

    logger.info("Shutting down application...")
    db.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    generate_unique_id_function=custom_generate_unique_id,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    lifespan=lifespan,
)


# Middleware for request timing and logging
@app.middleware("http")
async def add_process_time_header(request: Request, call_next: Callable):
    """Add processing time to response header and log request details"""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"Request failed after {process_time:.4f}s: {str(e)}")
        raise

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"Response: {response.status_code} - Process Time: {process_time:.4f}s")
    return response

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation failures and return them in a stable shape"""
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation Error",
            "errors": jsonable_encoder(exc.errors())
        }
    )

# Set all CORS enabled origins
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/", tags=["root"])
async def root():
    """
    API information and documentation links.
    """
    return {
        "message": f"Welcome to the {settings.PROJECT_NAME} API",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "docs": f"{settings.API_PREFIX}/docs",
        "redoc": f"{settings.API_PREFIX}/redoc"
    }
