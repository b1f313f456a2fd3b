from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ApiError, ValidationError
from .repositories import Repository, get_repository
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Create, list, reorder, complete and delete todo items.",
    },
]


def _error(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"errorMessage": message}, headers=headers
    )


def _validation_message(exc: RequestValidationError) -> str:
    """
    Build a readable message from the first validation error, e.g.
    "value: String should have at most 50 characters".
    """
    errors = exc.errors()
    if not errors:
        return "Request validation failed"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    # "body.value" reads better as "value"; a missing body keeps "body"
    if len(loc) > 1 and loc[0] == "body":
        loc = loc[1:]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def register_error_handlers(app: FastAPI) -> None:
    """
    Install the single failure boundary: every error leaves as {"errorMessage": ...}.
    """

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return await api_error_handler(request, ValidationError(_validation_message(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = str(exc.detail)
        logger.warning("%s %s failed: %s", request.method, request.url.path, message)
        return _error(exc.status_code, message, getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # The server re-raises after this response and logs the traceback itself
        logger.error(
            "Unhandled error on %s %s: %r", request.method, request.url.path, exc
        )
        return _error(500, "Internal server error")


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application: logging, CORS, request logging, error
    handlers, the todo router and static assets.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Todo API",
        description="REST API for an ordered todo list.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(
            "Request URL: %s, METHOD: %s, %s",
            str(request.url),
            request.method,
            datetime.now().isoformat(),
        )
        return await call_next(request)

    register_error_handlers(app)

    # PUBLIC_INTERFACE
    @app.get("/api/health", summary="Health Check", tags=["health"])
    def health_check(repo: Repository = Depends(get_repository)):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the storage backend.
        """
        return {"message": "Healthy", "backend": repo.name}

    app.include_router(todos_router.router)

    # Mounted last so API routes win over files of the same path
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.info("Static directory %s not found; not serving assets", settings.static_dir)

    return app


app = create_app()
