"""state snapshots

Revision ID: 20261018_snapshots
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the single key/value table that holds the register state:
- settings, products, customers, sales: one JSON document per key
- updated_at: last time the key was overwritten
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_snapshots'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('state_snapshots',
        sa.Column('key', sa.String(length=32), nullable=False),
        sa.Column('payload_json', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('key')
    )


def downgrade():
    op.drop_table('state_snapshots')
