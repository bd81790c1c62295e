"""create rentals table

Revision ID: 3a9c1e5b7d20
Revises:
Create Date: 2026-10-19 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3a9c1e5b7d20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "rentals",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("shop_name", sa.String(), nullable=False),
        sa.Column("tenant_name", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("rent_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("frequency", sa.String(), nullable=False, server_default="yearly"),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("rent_amount >= 0", name="ck_rentals_rent_amount_non_negative"),
        sa.CheckConstraint(
            "frequency in ('monthly', 'quarterly', 'yearly', 'custom')",
            name="ck_rentals_frequency",
        ),
        sa.CheckConstraint("status in ('active', 'terminated')", name="ck_rentals_status"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rentals_owner_id", "rentals", ["owner_id"], unique=False)
    op.create_index("ix_rentals_state", "rentals", ["state"], unique=False)
    op.create_index("ix_rentals_owner_id_created_at", "rentals", ["owner_id", "created_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_rentals_owner_id_created_at", table_name="rentals")
    op.drop_index("ix_rentals_state", table_name="rentals")
    op.drop_index("ix_rentals_owner_id", table_name="rentals")
    op.drop_table("rentals")
