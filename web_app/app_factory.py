"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    emitter,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        service_instance: ShortenerService instance
        emitter: Shared LogEmitter instance
        config: Configuration instance
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Demo URL shortener with remote logging middleware",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    
    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.emitter = emitter
    app.state.config = config
    app.state.log_stack = config.log_stack if config is not None else None
    
    # Browser front-ends post their logs to /api/logs
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.add_middleware(LoggingMiddleware)
    
    app.include_router(api_router, prefix="/api", tags=["API"])
    
    return app
