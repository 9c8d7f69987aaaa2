"""Browser-facing redirect route."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL, counting the visit."""
    service = request.app.state.service

    mapping = await service.resolve(short_code)

    # 302 keeps browsers from caching the redirect, so every visit is counted
    return RedirectResponse(url=mapping.long_url, status_code=status.HTTP_302_FOUND)
