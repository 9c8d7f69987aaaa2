"""Ownership checks for user-scoped operations."""

from typing import Optional

from .database.models import Principal, URLMapping
from .exceptions import ResourceNotFoundError

URL_NOT_FOUND_MESSAGE = "URL not found"


def assert_owned_by(mapping: Optional[URLMapping], principal: Principal) -> URLMapping:
    """Return mapping if principal owns it.

    Someone else's mapping is reported exactly like a missing one, so callers
    cannot probe which codes exist.

    Raises:
        ResourceNotFoundError: If mapping is None or owned by another user
    """
    if mapping is None or mapping.owner_id != principal.id:
        raise ResourceNotFoundError(URL_NOT_FOUND_MESSAGE)
    return mapping
