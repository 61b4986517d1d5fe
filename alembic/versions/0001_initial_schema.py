"""initial schema: consumers, friends, catalog, fundings, notifications

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

funding_status = sa.Enum('PRE_PROGRESS', 'IN_PROGRESS', 'SUCCESS', 'FAIL', name='funding_status')


def upgrade() -> None:
    op.create_table(
        'consumers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('telegram_id', sa.BIGINT(), nullable=True),
        sa.Column('bot_accessible', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_consumers_id', 'consumers', ['id'])
    op.create_index('ix_consumers_telegram_id', 'consumers', ['telegram_id'], unique=True)

    op.create_table(
        'friends',
        sa.Column('consumer_id', sa.Integer(), sa.ForeignKey('consumers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('to_consumer_id', sa.Integer(), sa.ForeignKey('consumers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('is_favorite', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_friends_to_consumer_id', 'friends', ['to_consumer_id'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_name', 'products', ['name'])

    op.create_table(
        'product_options',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), server_default='ACTIVE', nullable=False),
    )
    op.create_index('ix_product_options_id', 'product_options', ['id'])
    op.create_index('ix_product_options_product_id', 'product_options', ['product_id'])

    op.create_table(
        'anniversary_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
    )
    op.create_index('ix_anniversary_categories_id', 'anniversary_categories', ['id'])

    op.create_table(
        'fundings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('consumer_id', sa.Integer(), sa.ForeignKey('consumers.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('product_option_id', sa.Integer(), sa.ForeignKey('product_options.id'), nullable=False),
        sa.Column('anniversary_category_id', sa.Integer(), sa.ForeignKey('anniversary_categories.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('target_price', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('anniversary_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_private', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('status', funding_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_fundings_id', 'fundings', ['id'])
    op.create_index('ix_fundings_consumer_id', 'fundings', ['consumer_id'])
    op.create_index('ix_fundings_status', 'fundings', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('consumer_id', sa.Integer(), sa.ForeignKey('consumers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('related_entity_id', sa.String(), nullable=True),
        sa.Column('delivery_status', sa.String(), server_default='pending', nullable=False),
        sa.Column('failure_reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_consumer_id', 'notifications', ['consumer_id'])
    op.create_index('ix_notifications_type', 'notifications', ['type'])
    op.create_index('ix_notifications_delivery_status', 'notifications', ['delivery_status'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('fundings')
    funding_status.drop(op.get_bind(), checkfirst=True)
    op.drop_table('anniversary_categories')
    op.drop_table('product_options')
    op.drop_table('products')
    op.drop_table('friends')
    op.drop_table('consumers')
