"""Initial schema — device_assignments table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "device_assignments",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("device_id", sa.String(100), nullable=False),
        sa.Column("device_name", sa.String(200), nullable=True),
        sa.Column("survey_id", sa.String(100), nullable=False),
        sa.Column("survey_name", sa.String(200), nullable=True),
        sa.Column("from_date", sa.Date, nullable=False),
        sa.Column("to_date", sa.Date, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("assigned_by", sa.String(200), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("from_date <= to_date", name="ck_device_assignments_window"),
    )
    op.create_index("idx_device_assignments_device", "device_assignments", ["device_id"])
    op.create_index("idx_device_assignments_survey", "device_assignments", ["survey_id"])
    op.create_index("idx_device_assignments_status", "device_assignments", ["status"])
    op.create_index(
        "idx_device_assignments_device_status",
        "device_assignments",
        ["device_id", "status"],
    )


def downgrade() -> None:
    op.drop_index("idx_device_assignments_device_status", table_name="device_assignments")
    op.drop_index("idx_device_assignments_status", table_name="device_assignments")
    op.drop_index("idx_device_assignments_survey", table_name="device_assignments")
    op.drop_index("idx_device_assignments_device", table_name="device_assignments")
    op.drop_table("device_assignments")
