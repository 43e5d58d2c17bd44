"""Main FastAPI application for the FFmpeg API."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from . import __version__
from .models.config import APIConfig
from .models.responses import ErrorResponse, error_detail
from .routes import health, compress, convert, split, info
from .services.exceptions import UploadTooLargeError
from .services.file_manager import FileManager


# Global config instance
config = APIConfig.from_env()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting FFmpeg API v%s", app.version)
    logger.info("Configuration: %s", config.model_dump(exclude={"api_key"}))
    logger.info("API key required: %s", bool(config.api_key))

    FileManager(config).reset()
    cleanup_task = asyncio.create_task(periodic_cleanup())

    yield

    # Shutdown
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass
    logger.info("API shutdown complete")


async def periodic_cleanup():
    """Periodic sweep of stale uploads and outputs."""
    file_manager = FileManager(config)

    while True:
        try:
            await asyncio.sleep(config.cleanup_interval_seconds)
            result = file_manager.sweep(config.file_ttl_seconds)
            if result["files_deleted"] > 0:
                logger.info(
                    "Cleanup: removed %s stale files, freed %s bytes",
                    result["files_deleted"], result["bytes_freed"],
                )
        except asyncio.CancelledError:
            break
        except Exception:
            logger.exception("Cleanup error")


# Create FastAPI app
app = FastAPI(
    title="FFmpeg API",
    description="HTTP API for compressing, converting, splitting and inspecting media with FFmpeg",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Room for multipart boundaries and the small form fields next to the file
FORM_OVERHEAD_BYTES = 64 * 1024


@app.middleware("http")
async def reject_oversized_uploads(request: Request, call_next):
    """Refuse uploads whose declared length is over the limit before reading the body."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > config.max_upload_bytes + FORM_OVERHEAD_BYTES:
            return _error_response(
                413,
                error_detail(
                    "FILE_TOO_LARGE",
                    f"File size exceeds limit of {config.max_upload_mb:g}MB",
                    f"Declared request size of {content_length} bytes",
                ),
            )
    return await call_next(request)


def _error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorResponse(error=error, timestamp=datetime.now())),
    )


def _validation_messages(errors) -> list:
    messages = []
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return messages


# Global exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with structured error responses."""

    # If detail is already a dict (from our endpoints), use it directly
    if isinstance(exc.detail, dict):
        detail = exc.detail
    else:
        detail = error_detail("HTTP_ERROR", str(exc.detail))

    response = _error_response(exc.status_code, detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed form fields."""
    errors = exc.errors()
    if errors and all(tuple(err.get("loc", ()))[-1:] == ("file",) for err in errors):
        # a "file" field sent as plain text rather than as a file part
        return _error_response(
            400,
            error_detail("NO_FILE", "No file uploaded", "Send the media as the 'file' form field"),
        )
    return _error_response(
        400,
        error_detail("INVALID_PARAMETER", "Invalid request parameters", _validation_messages(errors)),
    )


@app.exception_handler(ValidationError)
async def parameter_validation_handler(request: Request, exc: ValidationError):
    """Form fields that parsed but fail the parameter models."""
    return _error_response(
        400,
        error_detail("INVALID_PARAMETER", "Invalid request parameters", _validation_messages(exc.errors())),
    )


@app.exception_handler(UploadTooLargeError)
async def upload_too_large_handler(request: Request, exc: UploadTooLargeError):
    return _error_response(
        413,
        error_detail(
            "FILE_TOO_LARGE",
            f"File size exceeds limit of {exc.limit_bytes / (1024 * 1024):g}MB",
            str(exc),
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)

    return _error_response(
        500,
        error_detail(
            "INTERNAL_ERROR",
            "Internal server error",
            str(exc) if config.debug else None,
        ),
    )


# Include routers
app.include_router(health.router)
app.include_router(compress.router)
app.include_router(convert.router)
app.include_router(split.router)
app.include_router(info.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "FFmpeg API",
        "version": __version__,
        "description": "HTTP API for compressing, converting, splitting and inspecting media with FFmpeg",
        "docs": "/docs",
        "health": "/health"
    }


def run():
    """Console entry point."""
    uvicorn.run(
        "ffmpeg_api.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run()
