"""Health check and the v2 placeholder."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from .schemas import HealthResponse, MessageResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


V2_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route("/v2", methods=V2_METHODS, response_model=MessageResponse, include_in_schema=False)
@router.api_route("/v2/{path:path}", methods=V2_METHODS, response_model=MessageResponse, include_in_schema=False)
async def version_two(path: str = ""):
    return MessageResponse(message="Version 2 is under development.")
