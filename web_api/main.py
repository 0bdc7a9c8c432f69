"""FastAPI application entry point"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from annotation.errors import AnnotationError, ConflictError, ValidationError
from annotation.fallback import LegacyCsvSource
from annotation.labels import LabelSet, load_labels
from config.app_config import AppConfig
from storage.annotation_store import AnnotationStore
from utils.logger import configure_logging, get_logger
from web_api.routers import annotations

logger = get_logger(__name__)

# Used in sanitized 500 messages
ACTIONS = {
    "/check": "checking annotations",
    "/save": "saving annotations",
    "/list": "listing annotations",
}


def public_error_message(request: Request, exc: Exception) -> str:
    """Raw message in development, a generic one otherwise"""
    if AppConfig.is_development():
        return str(exc)
    action = ACTIONS.get(request.url.path, "processing the request")
    return f"Server error while {action}. Check server logs."


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), not 422"""
    if AppConfig.is_development():
        message = "invalid request: " + "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
    else:
        message = "invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": str(exc), "exists": True}
    )


async def server_error_handler(request: Request, exc: Exception):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": public_error_message(request, exc)}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.store.close()


def create_app(store=None,
               fallback: Optional[LegacyCsvSource] = None,
               labels: Optional[LabelSet] = None) -> FastAPI:
    """
    Build the application

    Args:
        store: primary store handle, defaults to an AnnotationStore from DatabaseConfig
        fallback: legacy CSV source, defaults to AppConfig.CSV_FILE_PATH
        labels: label enumerations, defaults to AppConfig.LABELS_FILE
    """
    configure_logging(AppConfig.LOG_LEVEL)

    app = FastAPI(
        title="Video Annotator API",
        description="Ordered event annotations for videos",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.store = store if store is not None else AnnotationStore()
    app.state.fallback = fallback if fallback is not None else LegacyCsvSource(AppConfig.CSV_FILE_PATH)
    app.state.labels = labels if labels is not None else load_labels()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=AppConfig.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(AnnotationError, server_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    app.include_router(annotations.router)

    @app.get("/")
    def root():
        return {"message": "Video Annotator API", "version": "1.0.0"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
