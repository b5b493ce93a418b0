"""Usage Ledger — settles the reservation taken by the quota gate.

Invariants:
    - commit() runs exactly once per successful generation, after the response
      envelope is built and before notification
    - release() runs on every failure after admission; count is never incremented
    - A release failure is logged, never masks the original generation error
"""

import logging

from concept_studio.core.domain_types import IdentityEmail
from concept_studio.core.repository_protocols import UsageCounterStore

logger = logging.getLogger(__name__)


class UsageLedger:
    """Commit/release wrapper around the usage counter store."""

    def __init__(self, store: UsageCounterStore):
        self.store = store

    async def commit(self, email: IdentityEmail) -> int:
        """Count the generation; returns the identity's new count."""
        new_count = await self.store.commit(email)
        logger.info("Usage committed", extra={"new_count": new_count})
        return new_count

    async def release(self, email: IdentityEmail) -> None:
        """Return the in-flight slot without counting a generation."""
        try:
            await self.store.release(email)
        except Exception as e:
            logger.error(f"Failed to release quota reservation: {e}", exc_info=True)
