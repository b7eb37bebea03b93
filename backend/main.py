"""
Main FastAPI application for the post settings service.

Serves the post persistence and slug generation endpoints that the
post settings menu reconciles against.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time
import uvicorn
import logging

from config.settings import get_settings
from database import init_db
from logging_config import setup_logging, log_request
from routers import posts

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    logger.info("Starting post settings service...")

    try:
        init_db()
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise e

    yield

    logger.info("Shutting down post settings service...")


app = FastAPI(
    title="Post Settings Service",
    description="Post persistence and slug canonicalization for the post settings menu.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(posts.router)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log every request with its status and timing."""
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        log_request(request, error=e)
        raise
    log_request(request, response=response, duration_ms=int((time.time() - start_time) * 1000))
    return response


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Post Settings Service API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health"
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Global HTTP exception handler."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": str(exc)
        }
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
