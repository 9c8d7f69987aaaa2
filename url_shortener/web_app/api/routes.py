"""URL operation and statistics routes (/api/v1/url)."""

from fastapi import APIRouter, Depends, Request, Response, status

from .schemas import (
    ShortenRequest,
    UpdateUrlRequest,
    UrlResponse,
    LongUrlResponse,
    StatsUrlResponse,
    StatsListUrlResponse,
    StatsVisitsUrlResponse,
    ErrorResponse,
)
from ..dependencies import get_current_principal
from ...lib.common.urls import build_short_url
from ...lib.database.models import Principal, URLMapping
from ...lib.stats import UserStats

router = APIRouter()

BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid request"}}
UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Missing or invalid credentials"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "URL not found"}}


def short_url_for(request: Request, short_code: str) -> str:
    """Public short URL, honouring X-Forwarded-* (see ForwardedHeadersMiddleware)."""
    return build_short_url(
        short_code=short_code,
        base_url=request.state.base_url,
        path_prefix=request.state.path_prefix,
    )


def to_url_response(request: Request, mapping: URLMapping) -> UrlResponse:
    return UrlResponse(
        short_url=short_url_for(request, mapping.short_code),
        short_url_code=mapping.short_code,
        long_url=mapping.long_url,
        visits=mapping.visits,
        created_at=mapping.created_at,
        expires_at=mapping.expires_at,
    )


def to_stats_response(request: Request, stats: UserStats) -> StatsListUrlResponse:
    return StatsListUrlResponse(
        total_visits=stats.total_visits,
        urls=[
            StatsUrlResponse(
                **to_url_response(request, item.mapping).model_dump(),
                active=item.active,
            )
            for item in stats.urls
        ],
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UrlResponse,
    responses={**BAD_REQUEST, **UNAUTHORIZED},
    summary="Shorten a long URL",
    description="Creates a short version of the provided long URL.",
)
async def shorten_url(
    request: Request,
    body: ShortenRequest,
    principal: Principal = Depends(get_current_principal),
):
    service = request.app.state.service
    mapping = await service.shorten(principal, body.long_url, body.expires_at)
    return to_url_response(request, mapping)


@router.post(
    "/{short_url_code}",
    response_model=LongUrlResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Retrieve a long URL",
    description="Finds the original URL for a short code and counts the visit.",
)
async def resolve_url(request: Request, short_url_code: str):
    service = request.app.state.service
    mapping = await service.resolve(short_url_code)
    return LongUrlResponse(long_url=mapping.long_url)


@router.patch(
    "",
    response_model=UrlResponse,
    responses={**BAD_REQUEST, **UNAUTHORIZED, **NOT_FOUND},
    summary="Update a shortened URL",
    description="Issues a new short code for the URL and optionally moves its expiry.",
)
async def update_url(
    request: Request,
    body: UpdateUrlRequest,
    principal: Principal = Depends(get_current_principal),
):
    service = request.app.state.service
    mapping = await service.update(principal, body.short_url_code, body.expires_at)
    return to_url_response(request, mapping)


@router.delete(
    "/{short_url_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**UNAUTHORIZED, **NOT_FOUND},
    summary="Delete a shortened URL",
    description="Removes a URL mapping owned by the caller.",
)
async def delete_url(
    request: Request,
    short_url_code: str,
    principal: Principal = Depends(get_current_principal),
):
    service = request.app.state.service
    await service.delete(principal, short_url_code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/all",
    response_model=StatsListUrlResponse,
    responses=UNAUTHORIZED,
    summary="All URLs of the caller",
    description="Every URL the caller created, flagged active or expired, with total visits.",
)
async def all_urls(request: Request, principal: Principal = Depends(get_current_principal)):
    stats = await request.app.state.stats_service.all_urls(principal)
    return to_stats_response(request, stats)


@router.get(
    "/active",
    response_model=StatsListUrlResponse,
    responses=UNAUTHORIZED,
    summary="Active URLs of the caller",
    description="Only the caller's URLs that have not expired, with their total visits.",
)
async def active_urls(request: Request, principal: Principal = Depends(get_current_principal)):
    stats = await request.app.state.stats_service.active_urls(principal)
    return to_stats_response(request, stats)


@router.get(
    "/visits/{short_url_code}",
    response_model=StatsVisitsUrlResponse,
    responses={**UNAUTHORIZED, **NOT_FOUND},
    summary="Visits of a short URL",
    description="Visit count of one of the caller's short URLs.",
)
async def visits_by_short_url(
    request: Request,
    short_url_code: str,
    principal: Principal = Depends(get_current_principal),
):
    visits = await request.app.state.stats_service.visits(principal, short_url_code)
    return StatsVisitsUrlResponse(short_url_code=short_url_code, visits=visits)
