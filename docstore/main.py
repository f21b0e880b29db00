"""
FastAPI Application Entry Point

This is the main application module that sets up the FastAPI app,
configures middleware and exception handlers, and includes all routers.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docstore.config import settings
from docstore.errors import StoreError
from docstore.routers import admin, documents, health, queries
from docstore.storage import storage

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup: create the data directory and the audit log file if missing.
    """
    logger.info("Starting Document Store Service...")
    await storage.connect()
    logger.info("Document Store Service started successfully")

    yield

    logger.info("Document Store Service stopped")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    # Document Store Service API

    Named JSON objects stored one file per document, with:

    - **Field CRUD**: get, set and remove top-level keys
    - **Document lifecycle**: create and delete documents
    - **Merge**: composite snapshot of every document
    - **Key-set algebra**: union, intersect and difference of two documents
    - **Audit log**: every operation's outcome appended to a plain-text log

    ## Consistency

    - No per-document locking: concurrent writes to one document can lose updates
    - Merge is best-effort and may reflect concurrent changes partially
    """,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan
)


# ============================================================================
# Middleware
# ============================================================================

if settings.debug:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def add_request_timing(request: Request, call_next):
    """Add request timing header for monitoring."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests."""
    logger.debug(f"{request.method} {request.url.path}")
    response = await call_next(request)
    return response


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Document store failures are client errors carrying the store's message."""
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed parameters are rejected before the store is called."""
    logger.debug(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Bad Request"}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes, including a wrong method on a known path, are 404."""
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={"detail": "Not Found"}
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Returns generic error responses to prevent information leakage.
    Detailed errors are logged internally.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Include Routers
# ============================================================================

# Field CRUD and document lifecycle
app.include_router(documents.router)

# Merge and key-set algebra
app.include_router(queries.router)

# Audit log and demo reset
app.include_router(admin.router)

# Health check, status and monitoring
app.include_router(health.router)


# ============================================================================
# Root Endpoint
# ============================================================================

@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint.

    Returns basic service information.
    """
    return {
        "message": "Welcome to the document store",
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running"
    }


# ============================================================================
# Development Server
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers
    )
