from typing import Dict, List, Optional
from datetime import date, datetime
from pydantic import BaseModel, Field
from uuid import UUID


class AddXPRequest(BaseModel):
    amount: int = Field(..., description="XP to award, must be positive")
    reason: str = Field("", max_length=200)


class AddXPResponse(BaseModel):
    total_xp: int
    new_level: int
    level_up: bool
    title: str


class UpdateStreakRequest(BaseModel):
    streak_type: str = Field(..., description="dream or mood")


class UpdateStreakResponse(BaseModel):
    streak_type: str
    current_streak: int
    longest_streak: int
    is_new_record: bool
    milestone: bool
    xp_awarded: int
    achievements_unlocked: List[str] = []


class StreakRead(BaseModel):
    current: int
    longest: int
    last_date: Optional[date] = None


class LevelRead(BaseModel):
    total_xp: int
    current_level: int
    next_level_xp: int
    title: str


class ProgressResponse(BaseModel):
    level: LevelRead
    dream_streak: StreakRead
    mood_streak: StreakRead
    wellness_streak: StreakRead


class AchievementRead(BaseModel):
    id: UUID
    code: str
    name: str
    description: str
    icon: Optional[str] = None
    category: str
    tier: str
    xp_reward: int
    is_unlocked: bool
    unlocked_at: Optional[datetime] = None
    is_viewed: bool = False
    progress: int = Field(0, ge=0, le=100)


class AchievementsResponse(BaseModel):
    achievements: List[AchievementRead]
    grouped: Dict[str, List[AchievementRead]]
    total: int
    unlocked: int
