"""Quota Gate — admits a request only while its identity has free generations left.

Invariants:
    - Runs after identity validation and BEFORE any collaborator call
    - A committed count at or above the limit → QuotaExceededError (429)
    - Admission takes an in-flight reservation; a lost race (limit reached by
      concurrent reservations) is also QuotaExceededError
    - Every admitted request must later commit or release exactly once (UsageLedger)

Design Decisions:
    - Read-then-reserve: the read gives the precise 429 for the common case, the
      conditional reserve is the atomic guard that actually enforces the limit
"""

import logging

from concept_studio.core.domain_types import Branch, IdentityEmail
from concept_studio.core.enforce_quota import check_quota, remaining_generations
from concept_studio.core.errors import ErrorContext, QuotaExceededError
from concept_studio.core.repository_protocols import UsageCounterStore

logger = logging.getLogger(__name__)


class QuotaGate:
    """Checks and reserves free-generation quota per identity email."""

    def __init__(self, store: UsageCounterStore, limit: int):
        self.store = store
        self.limit = limit

    async def admit(self, email: IdentityEmail, branch: Branch) -> None:
        count = await self.store.get(email)
        check_quota(count, self.limit, branch)

        if not await self.store.reserve(email, self.limit):
            raise QuotaExceededError(self.limit, ErrorContext(branch=branch.value))

        logger.info(
            f"Quota reserved, {remaining_generations(count, self.limit)} "
            "generation(s) left before this one",
            extra={"branch": branch.value},
        )
