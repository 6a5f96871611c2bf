"""add table_preferences table

Revision ID: 9b7d2f4e6a18
Revises: 4c1e9a7b2d30
Create Date: 2025-11-16 10:41:27.558093

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9b7d2f4e6a18'
down_revision: Union[str, Sequence[str], None] = '4c1e9a7b2d30'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('table_preferences',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('context_type', sa.String(), nullable=False),
    sa.Column('context_id', sa.String(), nullable=True),
    sa.Column('column_visibility', sa.Text(), nullable=False),
    sa.Column('column_order', sa.Text(), nullable=False),
    sa.Column('column_sizing', sa.Text(), nullable=False),
    sa.Column('sorting', sa.Text(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('context_type', 'context_id', name='uix_table_preference_context')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('table_preferences')
