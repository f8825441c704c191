"""XP curve, level titles, streak arithmetic and achievement criteria.

These rules are pure so the service layer only has to load and persist state.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Mapping, Optional

DREAM_XP = 10
DETAILED_DREAM_XP = 20
DETAILED_DREAM_CHARS = 500
STREAK_MILESTONE_XP = 25

_TITLES = (
    (5, "Dream Novice"),
    (10, "Dream Seeker"),
    (20, "Dream Explorer"),
    (30, "Dream Interpreter"),
    (40, "Dream Sage"),
    (50, "Dream Master"),
)


def xp_for_level(level: int) -> int:
    """XP that must be earned during ``level`` to reach the next one."""
    return math.floor(100 * math.pow(level, 1.5))


def title_for_level(level: int) -> str:
    for ceiling, title in _TITLES:
        if level < ceiling:
            return title
    return "Dream Legend"


def xp_for_dream(text: str) -> int:
    return DETAILED_DREAM_XP if len(text) > DETAILED_DREAM_CHARS else DREAM_XP


@dataclass(frozen=True)
class LevelProgress:
    total_xp: int
    level: int
    next_level_xp: int
    title: str
    level_up: bool = False
    levels_gained: int = 0


def starting_progress() -> LevelProgress:
    return LevelProgress(total_xp=0, level=1, next_level_xp=xp_for_level(1), title=title_for_level(1))


def apply_xp(progress: LevelProgress, amount: int) -> LevelProgress:
    """Add XP, promoting as many levels as the new total covers."""
    total = progress.total_xp + amount
    level = progress.level
    threshold = progress.next_level_xp
    gained = 0
    while total >= threshold:
        level += 1
        gained += 1
        threshold += xp_for_level(level)
    return LevelProgress(
        total_xp=total,
        level=level,
        next_level_xp=threshold,
        title=title_for_level(level),
        level_up=gained > 0,
        levels_gained=gained,
    )


@dataclass(frozen=True)
class StreakStep:
    current: int
    longest: int
    last_date: date
    changed: bool


def advance_streak(
    current: int,
    longest: int,
    last_date: Optional[date],
    activity_date: date,
) -> StreakStep:
    """Record activity on ``activity_date``.

    Same day is a no-op, the following day extends the streak, any gap (or a
    date in the past) restarts it at 1.
    """
    if last_date == activity_date:
        return StreakStep(current=current, longest=longest, last_date=last_date, changed=False)
    if last_date is not None and last_date == activity_date - timedelta(days=1):
        current += 1
    else:
        current = 1
    return StreakStep(current=current, longest=max(longest, current), last_date=activity_date, changed=True)


def is_streak_milestone(streak: int) -> bool:
    return streak > 0 and (streak % 7 == 0 or streak in (30, 60, 100))


@dataclass(frozen=True)
class AchievementFacts:
    """What achievement criteria are evaluated against."""
    dream_count: int = 0
    streaks: Dict[str, int] = field(default_factory=dict)
    dream_length: int = 0


def _criteria_value(criteria: Mapping[str, Any], facts: AchievementFacts) -> Optional[int]:
    kind = criteria.get("type")
    if kind == "dream_count":
        return facts.dream_count
    if kind == "streak":
        return facts.streaks.get(criteria.get("category") or "dream", 0)
    if kind == "dream_length":
        return facts.dream_length
    # mood and journal criteria are tracked elsewhere
    return None


def achievement_met(criteria: Mapping[str, Any], facts: AchievementFacts) -> bool:
    value = _criteria_value(criteria, facts)
    if value is None:
        return False
    return value >= int(criteria.get("threshold") or 0)


def achievement_progress(criteria: Mapping[str, Any], facts: AchievementFacts) -> int:
    """Percentage towards ``criteria``, capped at 100."""
    value = _criteria_value(criteria, facts)
    threshold = int(criteria.get("threshold") or 0)
    if value is None:
        return 0
    if threshold <= 0:
        return 100
    return min(100, round(value * 100 / threshold))
