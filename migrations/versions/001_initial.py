"""Initial schema - Catalog tables

Revision ID: 001_initial
Revises: 
Create Date: 2026-01-01 00:00:00.000000

Creates the catalog and activity tables.
Based on the SQLAlchemy models defined in database/models/.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==================================================
    # CATALOG
    # ==================================================
    
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    
    op.create_table(
        'ai_apps',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('url', sa.Text, nullable=True),
        sa.Column('model_info', sa.String(200), nullable=True),
        sa.Column('environment', sa.String(200), nullable=True),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('creator_id', sa.Integer, nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='development'),
        sa.Column('is_public', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('usage_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    
    with op.batch_alter_table('ai_apps') as batch_op:
        batch_op.create_index('idx_ai_apps_visibility', ['is_public', 'status'])
        batch_op.create_index('idx_ai_apps_category', ['category_id'])
        batch_op.create_index('idx_ai_apps_creator', ['creator_id'])
    
    op.create_table(
        'app_tags',
        sa.Column('app_id', sa.Integer, sa.ForeignKey('ai_apps.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer, sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )
    
    with op.batch_alter_table('app_tags') as batch_op:
        batch_op.create_index('idx_app_tags_tag', ['tag_id'])
    
    # ==================================================
    # ACTIVITY
    # ==================================================
    
    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('app_id', sa.Integer, sa.ForeignKey('ai_apps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer, nullable=True),
        sa.Column('rating', sa.Integer, nullable=False),
        sa.Column('comment', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
    )
    
    with op.batch_alter_table('reviews') as batch_op:
        batch_op.create_index('idx_reviews_app', ['app_id'])
    
    op.create_table(
        'usage_logs',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('app_id', sa.Integer, sa.ForeignKey('ai_apps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer, nullable=True),
        sa.Column('action_type', sa.String(20), nullable=False, server_default='view'),
        sa.Column('session_id', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )
    
    with op.batch_alter_table('usage_logs') as batch_op:
        batch_op.create_index('idx_usage_logs_app_time', ['app_id', 'created_at'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('usage_logs')
    op.drop_table('reviews')
    op.drop_table('app_tags')
    op.drop_table('ai_apps')
    op.drop_table('tags')
    op.drop_table('categories')
