"""FastAPI application factory."""

from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import load_defaults
from ..extractor import YouTubeExtractor
from ..storage import FavoritesStore
from .deps import AppContext
from .routers import download, favorites, health, search, video


def build_context() -> AppContext:
    defaults = load_defaults()
    return AppContext(
        extractor=YouTubeExtractor(
            js_runtime=defaults.js_runtime,
            remote_components=defaults.remote_components,
        ),
        favorites=FavoritesStore(defaults.favorites_file),
        default_search_limit=defaults.search_limit,
    )


def create_app(
    context: Optional[AppContext] = None,
    *,
    allowed_origins: Optional[List[str]] = None,
) -> FastAPI:
    app = FastAPI(title="tubeplay API", version="1.0.0")
    app.state.context = context or build_context()

    if allowed_origins is None:
        allowed_origins = load_defaults().allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            {"success": False, "error": exc.detail}, status_code=exc.status_code
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        logger.debug(f"Rejected request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            {"success": False, "error": "Invalid request body"}, status_code=400
        )

    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(video.router, prefix="/api", tags=["video"])
    app.include_router(favorites.router, prefix="/api", tags=["favorites"])
    app.include_router(download.router, prefix="/api", tags=["download"])
    app.include_router(health.router, tags=["health"])
    return app
