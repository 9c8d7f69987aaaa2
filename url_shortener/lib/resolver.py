"""Collision-free short code selection."""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from .common.validators import is_reserved_short_code
from .database.base import URLShortenerDBBase
from .exceptions import ShortCodeConflictError, ShortCodeExhaustedError
from .shortcode import ShortCodeGenerator

T = TypeVar("T")


class UniqueCodeResolver:
    """Find a short code that no stored mapping uses.

    Candidates are tried in rounds of max_attempts. When a round finds no free
    code the length grows by one character, up to max_length_growth extra
    characters, before giving up with ShortCodeExhaustedError.
    """

    def __init__(
        self,
        db: URLShortenerDBBase,
        generator: Optional[ShortCodeGenerator] = None,
        max_attempts: int = 5,
        max_length_growth: int = 2,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the resolver.

        Args:
            db: Store queried for existing codes
            generator: Candidate producer
            max_attempts: Candidates per length, and store conflict retries
            max_length_growth: How many extra characters the fallback may add
            logger: Optional logger
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be positive (given: {max_attempts})")
        self.db = db
        self.generator = generator or ShortCodeGenerator()
        self.max_attempts = max_attempts
        self.max_length_growth = max(0, max_length_growth)
        self.logger = logger or logging.getLogger(__name__)

    async def resolve_unique_code(self, long_url: Optional[str] = None) -> str:
        """Return a code absent from the store at call time.

        Args:
            long_url: When given, the first candidate is derived from its hash

        Raises:
            ShortCodeExhaustedError: If every candidate was taken
        """
        base_length = self.generator.default_length

        if long_url:
            code = self.generator.generate_from_url(long_url)
            if await self._is_free(code):
                return code

        for growth in range(self.max_length_growth + 1):
            length = base_length + growth
            for attempt in range(self.max_attempts):
                code = self.generator.generate_random(length)
                if await self._is_free(code):
                    if attempt or growth:
                        self.logger.debug(
                            f"Generated code after {attempt + 1} attempts at length {length}: {code}"
                        )
                    return code

            self.logger.warning(
                f"No free short code after {self.max_attempts} attempts at length {length}"
            )

        raise ShortCodeExhaustedError("Unable to generate unique short code, try again later")

    async def persist_with_unique_code(
        self,
        write: Callable[[str], Awaitable[T]],
        long_url: Optional[str] = None,
    ) -> T:
        """Resolve a code and hand it to write, retrying if the store reports a conflict.

        The existence check and the insert are separate statements, so another
        request may take the code in between; the store's uniqueness
        constraint turns that into ShortCodeConflictError.

        Args:
            write: Coroutine function persisting a record under the given code
            long_url: Passed on to resolve_unique_code

        Returns:
            Whatever write returned
        """
        for attempt in range(self.max_attempts):
            code = await self.resolve_unique_code(long_url)
            try:
                return await write(code)
            except ShortCodeConflictError:
                self.logger.info(f"Short code {code} taken concurrently (attempt {attempt + 1})")

        raise ShortCodeExhaustedError("Unable to store a unique short code, try again later")

    async def _is_free(self, code: str) -> bool:
        if is_reserved_short_code(code):
            return False
        return not await self.db.short_code_exists(code)
