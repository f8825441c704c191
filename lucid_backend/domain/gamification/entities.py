"""XP / level, streak and achievement bookkeeping entities."""
from datetime import datetime
from enum import Enum
from uuid import uuid4
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text

from lucid_backend.infrastructure.db.meta import Base


class StreakType(str, Enum):
    """Activities a user can keep a streak on. Wellness advances with either."""
    DREAM = "dream"
    MOOD = "mood"
    WELLNESS = "wellness"


class UserLevel(Base):
    __tablename__ = "user_levels"

    user_id       = Column(UUID(as_uuid=True), primary_key=True)
    total_xp      = Column(Integer, default=0, nullable=False)
    current_level = Column(Integer, default=1, nullable=False)
    next_level_xp = Column(Integer, nullable=False)  # cumulative XP needed for the next level
    current_title = Column(String(50), nullable=False)
    updated_at    = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserStreak(Base):
    __tablename__ = "user_streaks"

    user_id = Column(UUID(as_uuid=True), primary_key=True)

    current_dream_streak = Column(Integer, default=0, nullable=False)
    longest_dream_streak = Column(Integer, default=0, nullable=False)
    last_dream_date      = Column(Date, nullable=True)

    current_mood_streak = Column(Integer, default=0, nullable=False)
    longest_mood_streak = Column(Integer, default=0, nullable=False)
    last_mood_date      = Column(Date, nullable=True)

    current_wellness_streak = Column(Integer, default=0, nullable=False)
    longest_wellness_streak = Column(Integer, default=0, nullable=False)
    last_wellness_date      = Column(Date, nullable=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Achievement(Base):
    """Catalogue entry. ``criteria`` is ``{"type", "threshold", "category"?}``."""
    __tablename__ = "achievements"

    id          = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    code        = Column(String(50), nullable=False, unique=True)
    name        = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    icon        = Column(String(50), nullable=True)
    category    = Column(String(20), nullable=False)   # beginner / consistency / volume / quality
    tier        = Column(String(20), nullable=False)   # bronze .. legendary
    xp_reward   = Column(Integer, default=0, nullable=False)
    criteria    = Column(JSONB, nullable=False)
    sort_order  = Column(Integer, default=0, nullable=False)
    is_hidden   = Column(Boolean, default=False, nullable=False)
    is_active   = Column(Boolean, default=True, nullable=False)
    created_at  = Column(DateTime, default=datetime.utcnow)


class UserAchievement(Base):
    __tablename__ = "user_achievements"

    user_id        = Column(UUID(as_uuid=True), primary_key=True)
    achievement_id = Column(UUID(as_uuid=True), ForeignKey("achievements.id", ondelete="CASCADE"), primary_key=True)
    unlocked_at    = Column(DateTime, default=datetime.utcnow, nullable=False)
    is_viewed      = Column(Boolean, default=False, nullable=False)
