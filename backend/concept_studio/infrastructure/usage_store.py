"""SQL Usage Store — atomic reserve/commit/release on the usage_records table.

Invariants:
    - Every mutation is ONE SQL statement evaluated by the database (no read-then-write)
    - reserve() succeeds only while count + in_flight < limit
    - commit() is the only statement that increments count
    - Each operation opens and commits its own short session

Design Decisions:
    - Conditional UPDATE ... WHERE count + in_flight < :limit RETURNING: PostgreSQL
      re-evaluates the predicate on the locked row, closing the check/increment race
    - Dialect-specific INSERT ... ON CONFLICT DO NOTHING to create rows: PostgreSQL in
      production, SQLite in tests — same statement shape on both
"""

import logging

from sqlalchemy import case, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from concept_studio.core.domain_types import IdentityEmail
from concept_studio.core.errors import DatabaseError
from concept_studio.infrastructure.database import DatabaseSessionManager
from concept_studio.models.usage_record import UsageRecord

logger = logging.getLogger(__name__)


class SqlUsageStore:
    """UsageCounterStore backed by SQLAlchemy async sessions."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager
        self._insert = (
            sqlite_insert
            if db_manager.engine.dialect.name == "sqlite"
            else pg_insert
        )

    async def get(self, email: IdentityEmail) -> int:
        """Committed generation count (0 for unknown identities)."""
        async with self._db.session() as db:
            result = await db.execute(
                select(UsageRecord.count).where(UsageRecord.email == email),
            )
            return result.scalar_one_or_none() or 0

    async def reserve(self, email: IdentityEmail, limit: int) -> bool:
        """Take one in-flight slot if the identity is under the limit."""
        async with self._db.session() as db:
            await db.execute(
                self._insert(UsageRecord)
                .values(email=email, count=0, in_flight=0)
                .on_conflict_do_nothing(index_elements=[UsageRecord.email]),
            )
            result = await db.execute(
                update(UsageRecord)
                .where(
                    UsageRecord.email == email,
                    UsageRecord.count + UsageRecord.in_flight < limit,
                )
                .values(in_flight=UsageRecord.in_flight + 1)
                .returning(UsageRecord.count)
                .execution_options(synchronize_session=False),
            )
            reserved = result.scalar_one_or_none() is not None
            await db.commit()
        if not reserved:
            logger.info("Usage reservation denied: limit reached")
        return reserved

    async def commit(self, email: IdentityEmail) -> int:
        """Turn one reservation into a counted generation. Returns the new count."""
        async with self._db.session() as db:
            result = await db.execute(
                update(UsageRecord)
                .where(UsageRecord.email == email)
                .values(
                    count=UsageRecord.count + 1,
                    in_flight=case(
                        (UsageRecord.in_flight > 0, UsageRecord.in_flight - 1),
                        else_=0,
                    ),
                )
                .returning(UsageRecord.count)
                .execution_options(synchronize_session=False),
            )
            new_count = result.scalar_one_or_none()
            if new_count is None:
                raise DatabaseError(
                    "no usage record for identity", "commit",
                )
            await db.commit()
            return new_count

    async def release(self, email: IdentityEmail) -> None:
        """Return an unused reservation (generation failed)."""
        async with self._db.session() as db:
            await db.execute(
                update(UsageRecord)
                .where(UsageRecord.email == email, UsageRecord.in_flight > 0)
                .values(in_flight=UsageRecord.in_flight - 1)
                .execution_options(synchronize_session=False),
            )
            await db.commit()
