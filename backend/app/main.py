"""
Support Bot API - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .api import users_router, chat_router, debug_router, uploads_router
from .core.errors import ServiceError
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .services import (
    ChatService,
    CloudWatchMonitor,
    DebugService,
    LambdaGenerator,
    S3Uploader,
    UploadService,
    create_aws_clients,
)
from .storage import ChatStore, DebugSessionStore, LocalStorage, UserStorage

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def init_services(app: FastAPI) -> None:
    """Construct storage, AWS collaborators and services and attach them to app.state."""
    storage = LocalStorage(settings.local_storage_path)
    clients = create_aws_clients(settings)
    generator = LambdaGenerator(clients.lambda_, settings.genai_function_name)

    app.state.user_storage = UserStorage(storage)
    app.state.chat_service = ChatService(ChatStore(storage), generator=generator)
    app.state.debug_service = DebugService(
        DebugSessionStore(storage),
        monitor=CloudWatchMonitor.from_settings(clients, settings),
        generator=generator,
    )
    app.state.upload_service = (
        UploadService(S3Uploader(clients.s3, settings.s3_bucket))
        if settings.s3_bucket else None
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    setup_logging(settings)
    init_services(app)

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Storage path: {settings.local_storage_path}")
    logger.info(f"AWS region: {settings.aws_region}")
    if not settings.genai_function_name:
        logger.warning("GENAI_FUNCTION_NAME is not set; /ask and /debug will fail")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="L1 support chatbot backend: chat history, GenAI answers and CloudWatch debugging",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware (after CORS)
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


# Include routers
app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(chat_router, prefix=settings.api_prefix)
app.include_router(debug_router, prefix=settings.api_prefix)
app.include_router(uploads_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "message": "Backend API Running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
