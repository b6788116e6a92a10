import logging
import os
from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .logging_config import setup_logging
from .middleware.logging_middleware import LoggingMiddleware
from .routers import chat as chat_router
from .routers import health as health_router
from .routers import nlu as nlu_router

logger = logging.getLogger(__name__)


def is_production() -> bool:
    return os.getenv("NODE_ENV") == "production"


def cors_origins() -> List[str]:
    """Chat widget origins; any origin is accepted outside production."""
    if not is_production():
        return ["*"]
    return [
        os.getenv("FRONTEND_URL", "http://localhost:5173"),
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # widget demo page
    ]


def create_app() -> FastAPI:
    # config has already loaded the .env files on import
    setup_logging(config.LOG_LEVEL)
    app = FastAPI(title="LeadBot Backend", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router.router)
    app.include_router(chat_router.router)
    app.include_router(nlu_router.router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)

        content = {"detail": "Internal server error"}
        if not is_production():
            content = {"detail": str(exc), "type": type(exc).__name__}
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()
