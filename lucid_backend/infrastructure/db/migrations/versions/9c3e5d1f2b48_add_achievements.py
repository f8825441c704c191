"""add_achievements

Revision ID: 9c3e5d1f2b48
Revises: 4b1f0c2a9e77
Create Date: 2026-10-18 15:41:27.903116

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '9c3e5d1f2b48'
down_revision: Union[str, None] = '4b1f0c2a9e77'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# code, name, description, icon, category, tier, xp_reward, criteria
DEFAULT_ACHIEVEMENTS = [
    ('first_dream', 'First Dream', 'Log your first dream', 'moon', 'beginner', 'bronze', 10,
     {'type': 'dream_count', 'threshold': 1}),
    ('journaler', 'Journaler', 'Log 10 dreams', 'book', 'volume', 'silver', 50,
     {'type': 'dream_count', 'threshold': 10}),
    ('archivist', 'Dream Archivist', 'Log 50 dreams', 'archive', 'volume', 'gold', 150,
     {'type': 'dream_count', 'threshold': 50}),
    ('week_streak', 'Week of Dreams', 'Log a dream 7 days in a row', 'flame', 'consistency', 'silver', 75,
     {'type': 'streak', 'threshold': 7, 'category': 'dream'}),
    ('month_streak', 'Month of Dreams', 'Log a dream 30 days in a row', 'fire', 'consistency', 'platinum', 300,
     {'type': 'streak', 'threshold': 30, 'category': 'dream'}),
    ('wellness_week', 'Balanced Week', 'Keep a 7-day wellness streak', 'leaf', 'consistency', 'silver', 50,
     {'type': 'streak', 'threshold': 7, 'category': 'wellness'}),
    ('detailed_dreamer', 'Detailed Dreamer', 'Log a dream longer than 500 characters', 'feather', 'quality', 'bronze', 25,
     {'type': 'dream_length', 'threshold': 500}),
]


def upgrade() -> None:
    achievements = op.create_table(
        'achievements',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('tier', sa.String(20), nullable=False),
        sa.Column('xp_reward', sa.Integer, nullable=False, server_default='0'),
        sa.Column('criteria', JSONB, nullable=False),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('is_hidden', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=True, server_default=sa.func.now()),
    )

    op.create_table(
        'user_achievements',
        sa.Column('user_id', UUID(as_uuid=True), primary_key=True),
        sa.Column('achievement_id', UUID(as_uuid=True),
                  sa.ForeignKey('achievements.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('unlocked_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('is_viewed', sa.Boolean, nullable=False, server_default=sa.false()),
    )

    op.bulk_insert(achievements, [
        {
            'id': uuid.uuid4(),
            'code': code,
            'name': name,
            'description': description,
            'icon': icon,
            'category': category,
            'tier': tier,
            'xp_reward': xp_reward,
            'criteria': criteria,
            'sort_order': position,
            'is_hidden': False,
            'is_active': True,
        }
        for position, (code, name, description, icon, category, tier, xp_reward, criteria)
        in enumerate(DEFAULT_ACHIEVEMENTS)
    ])


def downgrade() -> None:
    op.drop_table('user_achievements')
    op.drop_table('achievements')
