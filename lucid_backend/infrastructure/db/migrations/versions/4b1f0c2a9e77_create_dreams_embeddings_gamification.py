"""create_dreams_embeddings_gamification

Revision ID: 4b1f0c2a9e77
Revises:
Create Date: 2026-10-18 10:02:11.514203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from pgvector.sqlalchemy import Vector


# revision identifiers, used by Alembic.
revision: str = '4b1f0c2a9e77'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMBEDDING_DIMENSIONS = 1536


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        'dreams',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('sleep_hours', sa.Float, nullable=True),
        sa.Column('interpretation', sa.Text, nullable=True),
        sa.Column('jungian_analysis', sa.Text, nullable=True),
        sa.Column('freudian_analysis', sa.Text, nullable=True),
        sa.Column('cognitive_analysis', sa.Text, nullable=True),
        sa.Column('synthesized_analysis', sa.Text, nullable=True),
        sa.Column('symbols', ARRAY(sa.Text), server_default='{}', nullable=False),
        sa.Column('emotions', ARRAY(sa.Text), server_default='{}', nullable=False),
        sa.Column('themes', ARRAY(sa.Text), server_default='{}', nullable=False),
        sa.Column('archetypal_figures', ARRAY(sa.Text), server_default='{}', nullable=False),
        sa.Column('cognitive_patterns', ARRAY(sa.Text), server_default='{}', nullable=False),
        sa.Column('wish_indicators', ARRAY(sa.Text), server_default='{}', nullable=False),
        sa.Column('reflection_questions', ARRAY(sa.Text), server_default='{}', nullable=False),
    )
    op.create_index('ix_dreams_user_id', 'dreams', ['user_id'])
    op.create_index('ix_dreams_created_at', 'dreams', ['created_at'])
    op.create_index('ix_dreams_user_created', 'dreams', ['user_id', sa.text('created_at DESC')])

    op.create_table(
        'dream_embeddings',
        sa.Column('dream_id', UUID(as_uuid=True), sa.ForeignKey('dreams.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('embedding', Vector(EMBEDDING_DIMENSIONS), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'user_levels',
        sa.Column('user_id', UUID(as_uuid=True), primary_key=True),
        sa.Column('total_xp', sa.Integer, nullable=False, server_default='0'),
        sa.Column('current_level', sa.Integer, nullable=False, server_default='1'),
        sa.Column('next_level_xp', sa.Integer, nullable=False),
        sa.Column('current_title', sa.String(50), nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'user_streaks',
        sa.Column('user_id', UUID(as_uuid=True), primary_key=True),
        sa.Column('current_dream_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('longest_dream_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_dream_date', sa.Date, nullable=True),
        sa.Column('current_mood_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('longest_mood_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_mood_date', sa.Date, nullable=True),
        sa.Column('current_wellness_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('longest_wellness_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_wellness_date', sa.Date, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )


def downgrade() -> None:
    op.drop_table('user_streaks')
    op.drop_table('user_levels')
    op.drop_table('dream_embeddings')
    op.drop_index('ix_dreams_user_created', table_name='dreams')
    op.drop_index('ix_dreams_created_at', table_name='dreams')
    op.drop_index('ix_dreams_user_id', table_name='dreams')
    op.drop_table('dreams')
