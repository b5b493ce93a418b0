"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete for create_all/Alembic
"""

from concept_studio.models.usage_record import UsageRecord  # noqa: F401
