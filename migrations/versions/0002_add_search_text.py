"""add search_text column to resources

Revision ID: 0002
Revises: 0001
Create Date: 2025-11-30 23:17:28.000000

search_text is derived from the payload on every write; existing rows
stay NULL until they are next updated.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("resources") as batch_op:
        batch_op.add_column(sa.Column("search_text", sa.Text(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("resources") as batch_op:
        batch_op.drop_column("search_text")
