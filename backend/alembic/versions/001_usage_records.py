"""Usage records — per-identity free-generation counter with in-flight reservations.

Revision ID: 001_usage_records
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_usage_records"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "usage_records",
        sa.Column("email", sa.String(320), primary_key=True),
        sa.Column("count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("in_flight", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("count >= 0", name="ck_usage_records_count_non_negative"),
        sa.CheckConstraint("in_flight >= 0", name="ck_usage_records_in_flight_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("usage_records")
