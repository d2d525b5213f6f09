"""create clients table

Revision ID: 003
Revises: 002
Create Date: 2026-01-14 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("client_type", sa.String(32), nullable=False),
        sa.Column("primary_contact_name", sa.String(255), nullable=False),
        sa.Column("primary_contact_email", sa.String(320), nullable=False),
        sa.Column("primary_contact_phone", sa.String(50), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clients_company_name", "clients", ["company_name"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_clients_company_name", table_name="clients")
    op.drop_table("clients")
