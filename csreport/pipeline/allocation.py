"""Lookup code allocation against the report store."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from csreport.errors import AllocationExhaustedError, CodeAlreadyTakenError
from csreport.utils.codes import new_lookup_code

logger = structlog.get_logger(__name__)

ExistsFn = Callable[[str], Awaitable[bool]]

DEFAULT_MAX_ATTEMPTS = 10


class CodeAllocator:
    """Decide a store-unique lookup code without writing anything.

    A custom code is accepted only as given: taken codes are rejected rather
    than altered. Generated codes are redrawn until one is free or
    ``max_attempts`` candidates have collided. The existence check is a
    pre-check only; the store's unique index settles concurrent writers.
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        generate: Callable[[], str] = new_lookup_code,
    ):
        if max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        self.max_attempts = max_attempts
        self.generate = generate

    async def allocate(self, custom_code: str | None, exists: ExistsFn) -> str:
        """Return the lookup code to store for a new report."""
        if custom_code:
            if await exists(custom_code):
                logger.info("custom_code_rejected", lookup_code=custom_code)
                raise CodeAlreadyTakenError(custom_code)
            logger.info("custom_code_accepted", lookup_code=custom_code)
            return custom_code

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate()
            if not await exists(candidate):
                logger.info("generated_code_accepted", lookup_code=candidate, attempt=attempt)
                return candidate
            logger.warning("generated_code_collision", lookup_code=candidate, attempt=attempt)

        logger.error("code_allocation_exhausted", attempts=self.max_attempts)
        raise AllocationExhaustedError(self.max_attempts)
