"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    ShortenResult,
    LinkStats,
    LogAccepted,
    HealthResponse,
    ErrorResponse,
)
from log_middleware import LogIntent
from shortener import ShortenValidationError

router = APIRouter()


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URLs",
    description="Shorten up to five URLs at once, each with an optional validity and custom code.",
)
async def shorten_urls(request: Request, body: ShortenRequest):
    """Create shortened URLs."""
    service = request.app.state.service
    
    try:
        results = await service.shorten([item.model_dump() for item in body.urls])
    except ShortenValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.errors,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {str(e)}",
        )
    
    return ShortenResponse(results=[ShortenResult(**result) for result in results])


@router.get(
    "/stats",
    response_model=List[LinkStats],
    summary="Get statistics",
    description="List the short URLs issued by this server process.",
)
async def get_statistics(request: Request):
    """Get link statistics."""
    service = request.app.state.service
    
    stats = await service.fetch_stats()
    
    return [LinkStats(**stat) for stat in stats]


@router.post(
    "/logs",
    response_model=LogAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a log",
    description=(
        "Hand a log intent to the logging middleware. Delivery to the remote "
        "logging API happens in the background; the response is always 202."
    ),
)
async def submit_log(request: Request, body: LogIntent):
    """Forward a client log to the shared emitter."""
    emitter = request.app.state.emitter
    
    emitter.emit(body.stack, body.level, body.package, body.message)
    
    return LogAccepted()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    service = request.app.state.service
    
    health = await service.health_check()
    
    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        issued_links=health["issued_links"],
        pending_log_deliveries=health["pending_log_deliveries"],
        timestamp=datetime.now(timezone.utc),
    )
