"""
askbase API Server
==================
FastAPI server exposing the response resolver:
- POST /ai     answer a question
- POST /learn  teach an answer for an exact question
- GET  /api/stats, /health
"""

from contextlib import asynccontextmanager
from typing import Any, Dict

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, setup_logging
from reasoning import create_resolver


logger = structlog.get_logger(__name__)

# Global components dictionary
_components: Dict[str, Any] = {}


def get_components() -> Dict[str, Any]:
    """Get initialized components"""
    return _components


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the resolver once per process. Configuration errors abort startup."""
    settings = _components.get('settings')
    if settings is None:
        settings = Settings.from_env()
        _components['settings'] = settings

    if 'resolver' not in _components:
        _components['resolver'] = create_resolver(settings)

    logger.info("server_started", host=settings.HOST, port=settings.PORT)
    yield
    logger.info("server_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="askbase",
        description="Question answering over a curated knowledge base",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routes import router
    app.include_router(router)

    return app


app = create_app()


def run_server(settings: Settings = None):
    """Run the server with uvicorn. Raises ConfigurationError."""
    import uvicorn

    settings = settings or Settings.from_env()
    setup_logging(settings.logging.level, settings.logging.format)
    _components['settings'] = settings

    # Fail before binding the port if the configuration is broken
    _components['resolver'] = create_resolver(settings)

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.logging.level.lower())


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="askbase API Server")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    args = parser.parse_args()

    settings = Settings.from_env()
    if args.host:
        settings.HOST = args.host
    if args.port:
        settings.PORT = args.port
    run_server(settings)
