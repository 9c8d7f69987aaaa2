"""Visit accounting for resolved mappings."""

import dataclasses
import logging
from typing import Optional

from .database.base import URLShortenerDBBase
from .database.models import URLMapping
from .exceptions import ResourceNotFoundError


class VisitCounter:
    """Counts resolutions.

    The increment is a single atomic store operation, so concurrent
    resolutions of the same code each add exactly one visit.
    """

    def __init__(self, db: URLShortenerDBBase, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    async def record_visit(self, mapping: URLMapping) -> URLMapping:
        """Add one visit to mapping and return it with the stored count.

        Raises:
            ResourceNotFoundError: If the mapping was deleted or given a new code
                after it was read
        """
        visits = await self.db.increment_visits(mapping.id, mapping.short_code)
        if visits is None:
            raise ResourceNotFoundError("URL not found")

        self.logger.debug(f"Visit recorded for {mapping.short_code}: {visits}")
        return dataclasses.replace(mapping, visits=visits)
