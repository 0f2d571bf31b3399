"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database schema"""

    # Создание таблицы orders
    op.create_table(
        'orders',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('service_id', sa.String(64), nullable=False),
        sa.Column('author_id', sa.String(64), nullable=False),
        sa.Column('customer_id', sa.String(64), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Pending'),
        sa.Column('message', sa.Text(), nullable=False, server_default=''),
        sa.Column('author_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('customer_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('Pending', 'Accepted', 'Refused', 'Confirmed')",
            name='chk_orders_status',
        ),
        sa.CheckConstraint('author_id <> customer_id', name='chk_orders_distinct_parties'),
        sa.CheckConstraint(
            "(status = 'Confirmed') = (completed_at IS NOT NULL)",
            name='chk_orders_completed_at',
        ),
    )

    # Создание индексов для orders
    op.create_index('idx_orders_author_id', 'orders', ['author_id'], unique=False)
    op.create_index('idx_orders_customer_id', 'orders', ['customer_id'], unique=False)
    op.create_index('idx_orders_service_id', 'orders', ['service_id'], unique=False)
    op.create_index('idx_orders_status', 'orders', ['status'], unique=False)

    # Создание таблицы votes
    op.create_table(
        'votes',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('subject_kind', sa.String(20), nullable=False),
        sa.Column('subject_id', sa.String(64), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('is_upvote', sa.Boolean(), nullable=False),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('subject_kind', 'subject_id', 'user_id', name='uq_votes_subject_user'),
        sa.CheckConstraint(
            "subject_kind IN ('blog_post', 'service')", name='chk_votes_subject_kind'
        ),
    )
    op.create_index('idx_votes_subject', 'votes', ['subject_kind', 'subject_id'], unique=False)

    # Услуги и посты (внешние модули, нужны для проверки существования)
    op.create_table(
        'services',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('owner_id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('upvotes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('downvotes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'created_at', sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('upvotes >= 0 AND downvotes >= 0', name='chk_services_counters'),
    )
    op.create_index('idx_services_owner_id', 'services', ['owner_id'], unique=False)

    op.create_table(
        'blog_posts',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('author_id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column(
            'created_at', sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Drop all tables"""
    op.drop_table('blog_posts')
    op.drop_index('idx_services_owner_id', table_name='services')
    op.drop_table('services')
    op.drop_index('idx_votes_subject', table_name='votes')
    op.drop_table('votes')
    op.drop_index('idx_orders_status', table_name='orders')
    op.drop_index('idx_orders_service_id', table_name='orders')
    op.drop_index('idx_orders_customer_id', table_name='orders')
    op.drop_index('idx_orders_author_id', table_name='orders')
    op.drop_table('orders')
