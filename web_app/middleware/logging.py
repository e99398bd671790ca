"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging.

    Server errors and unhandled exceptions are also sent to the remote
    logging API through the app's LogEmitter, when one is configured.
    """
    
    def __init__(self, app, logger: logging.Logger = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or logging.getLogger("url_shortener.web")
    
    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.time()
        
        client_ip = request.client.host if request.client else "unknown"
        self.logger.info(f"Request: {request.method} {request.url.path} from {client_ip}")
        
        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(f"Unhandled error: {request.method} {request.url.path} - {e!r}")
            self._emit_error(request, f"{request.method} {request.url.path} raised {e!r}")
            raise
        
        duration_ms = (time.time() - start_time) * 1000
        
        self.logger.info(
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )
        
        if response.status_code >= 500:
            self._emit_error(
                request,
                f"{request.method} {request.url.path} failed with status {response.status_code}",
            )
        
        return response
    
    def _emit_error(self, request: Request, message: str) -> None:
        emitter = getattr(request.app.state, "emitter", None)
        if emitter is not None:
            emitter.emit(getattr(request.app.state, "log_stack", None), "ERROR", "web_app", message)
