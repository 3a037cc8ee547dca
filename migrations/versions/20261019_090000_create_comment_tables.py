"""Create content item and comment tables

Revision ID: 5c0e6a1f9b21
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# Revision identifiers, used by Alembic
revision: str = '5c0e6a1f9b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        'content_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('comments_open', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_content_items_slug', 'content_items', ['slug'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('content_item_id', sa.Integer(), nullable=False),
        sa.Column('author_name', sa.String(length=245), nullable=False, server_default=''),
        sa.Column('author_email', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('author_url', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('author_ip', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('user_agent', sa.String(length=254), nullable=False, server_default=''),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('comment_type', sa.String(length=20), nullable=False, server_default='comment'),
        sa.Column('parent_id', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('moderation_state', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['content_item_id'], ['content_items.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_content_item', 'comments', ['content_item_id'])
    op.create_index('ix_comments_moderation_state', 'comments', ['moderation_state'])
    op.create_index(
        'ix_comments_content_item_created', 'comments', ['content_item_id', 'created_at']
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index('ix_comments_content_item_created', table_name='comments')
    op.drop_index('ix_comments_moderation_state', table_name='comments')
    op.drop_index('ix_comments_content_item', table_name='comments')
    op.drop_table('comments')
    op.drop_index('ix_content_items_slug', table_name='content_items')
    op.drop_table('content_items')
