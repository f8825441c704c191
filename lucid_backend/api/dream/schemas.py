from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class DreamRead(BaseModel):
    id: UUID
    content: str
    interpretation: Optional[str] = None
    jungian_analysis: Optional[str] = None
    freudian_analysis: Optional[str] = None
    cognitive_analysis: Optional[str] = None
    synthesized_analysis: Optional[str] = None
    symbols: List[str] = []
    emotions: List[str] = []
    themes: List[str] = []
    archetypal_figures: List[str] = []
    cognitive_patterns: List[str] = []
    wish_indicators: List[str] = []
    reflection_questions: List[str] = []
    sleep_hours: Optional[float] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ─────────────────────────── interpretation ─────────────────────────── #

class InterpretDreamRequest(BaseModel):
    dream: str = Field(..., max_length=20000, description="Dream narrative")
    sleep_hours: Optional[float] = Field(None, ge=0, le=24)
    save_to_history: bool = False


class Perspectives(BaseModel):
    jungian: str
    freudian: str
    cognitive: str
    synthesized: str


class ExtractedPatterns(BaseModel):
    symbols: List[str]
    emotions: List[str]
    themes: List[str]
    archetypal_figures: List[str]
    cognitive_patterns: List[str]
    wish_indicators: List[str]


class GamificationSummary(BaseModel):
    xp_awarded: int
    level_up: bool
    new_level: int
    streak_count: int
    streak_milestone: bool
    achievements_unlocked: List[str] = []


class InterpretDreamResponse(BaseModel):
    interpretation: str
    full_interpretation: str
    perspectives: Perspectives
    patterns: ExtractedPatterns
    reflection_questions: List[str]
    saved_dream: Optional[DreamRead] = None
    gamification: Optional[GamificationSummary] = None


# ────────────────────────────── patterns ────────────────────────────── #

class FrequencyEntryRead(BaseModel):
    label: str
    count: int

    model_config = ConfigDict(from_attributes=True)


class DreamFrequencyRead(BaseModel):
    this_week: int
    this_month: int

    model_config = ConfigDict(from_attributes=True)


class SleepStatsRead(BaseModel):
    average: float
    min: float
    max: float
    total: int

    model_config = ConfigDict(from_attributes=True)


class SleepChartPointRead(BaseModel):
    date: str
    hours: float
    content: str

    model_config = ConfigDict(from_attributes=True)


class DreamPatternsResponse(BaseModel):
    total_dreams: int
    top_symbols: List[FrequencyEntryRead]
    top_emotions: List[FrequencyEntryRead]
    top_themes: List[FrequencyEntryRead]
    dream_frequency: DreamFrequencyRead
    sleep_stats: SleepStatsRead
    sleep_chart: List[SleepChartPointRead]

    model_config = ConfigDict(from_attributes=True)
