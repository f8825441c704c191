"""Gamification service: XP, levels, activity streaks and achievements."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.errors import ValidationError
from lucid_backend.domain.gamification.entities import Achievement, StreakType, UserLevel, UserStreak
from lucid_backend.domain.gamification.repo import GamificationRepository
from lucid_backend.services.gamification.progression import (
    DETAILED_DREAM_XP,
    STREAK_MILESTONE_XP,
    AchievementFacts,
    LevelProgress,
    achievement_met,
    achievement_progress,
    advance_streak,
    apply_xp,
    is_streak_milestone,
    starting_progress,
    xp_for_dream,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakUpdate:
    streak_type: str
    current_streak: int
    longest_streak: int
    is_new_record: bool
    milestone: bool = False
    xp_awarded: int = 0
    achievements_unlocked: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DreamLoggedRewards:
    xp_awarded: int
    level_up: bool
    new_level: int
    streak: int
    streak_milestone: bool
    achievements_unlocked: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AchievementCheck:
    newly_unlocked: Tuple[str, ...] = ()
    xp_gained: int = 0
    level_up: bool = False
    new_level: Optional[int] = None


@dataclass(frozen=True)
class AchievementStatus:
    achievement: Achievement
    is_unlocked: bool
    unlocked_at: Optional[datetime]
    is_viewed: bool
    progress: int


class GamificationService:
    """Loads gamification state, applies the progression rules and persists the result."""

    def __init__(self, gamification_repo: GamificationRepository):
        self._repo = gamification_repo

    async def award_xp(
        self,
        user_id: UUID,
        amount: int,
        reason: str,
        session: AsyncSession,
    ) -> LevelProgress:
        """Add XP to the user's total, promoting levels as needed."""
        if amount is None or amount <= 0:
            raise ValidationError("amount must be a positive integer")
        if not reason or not reason.strip():
            raise ValidationError("reason is required")

        level = await self._repo.get_level(user_id, session)
        before = self._progress_from(level)
        after = apply_xp(before, amount)

        if level is None:
            level = UserLevel(user_id=user_id)
        level.total_xp = after.total_xp
        level.current_level = after.level
        level.next_level_xp = after.next_level_xp
        level.current_title = after.title
        await self._repo.save_level(level, session)

        logger.info(f"[gamification] +{amount} XP for user {user_id} ({reason}); level={after.level} level_up={after.level_up}")
        return after

    async def update_streak(
        self,
        user_id: UUID,
        streak_type: str,
        session: AsyncSession,
        activity_date: Optional[date] = None,
    ) -> StreakUpdate:
        """Record activity for ``streak_type`` and advance the wellness streak alongside it.

        Achievements whose criteria the new streaks satisfy are unlocked as well.
        """
        update, streaks, _ = await self._record_streak(user_id, streak_type, session, activity_date)
        check = await self.check_achievements(user_id, session, streaks=streaks)
        return replace(update, achievements_unlocked=check.newly_unlocked)

    async def _record_streak(
        self,
        user_id: UUID,
        streak_type: str,
        session: AsyncSession,
        activity_date: Optional[date],
    ) -> Tuple[StreakUpdate, Dict[str, int], Optional[LevelProgress]]:
        try:
            kind = StreakType(streak_type)
        except ValueError:
            raise ValidationError(f"Unknown streak type: {streak_type}")
        if kind is StreakType.WELLNESS:
            raise ValidationError("Wellness streak is derived from dream and mood activity")

        activity_date = activity_date or datetime.utcnow().date()
        streak = await self._repo.get_streak(user_id, session)
        if streak is None:
            streak = self._new_streak(user_id)

        previous_longest = getattr(streak, f"longest_{kind.value}_streak") or 0
        step = self._advance(streak, kind, activity_date)
        wellness = self._advance(streak, StreakType.WELLNESS, activity_date)
        milestone = wellness.changed and is_streak_milestone(wellness.current)

        if step.changed or wellness.changed:
            await self._repo.save_streak(streak, session)

        xp_awarded = 0
        milestone_progress = None
        if milestone:
            xp_awarded = STREAK_MILESTONE_XP
            milestone_progress = await self.award_xp(
                user_id, xp_awarded, f"{wellness.current}-day streak milestone", session
            )

        update = StreakUpdate(
            streak_type=kind.value,
            current_streak=step.current,
            longest_streak=step.longest,
            is_new_record=step.changed and step.current > previous_longest,
            milestone=milestone,
            xp_awarded=xp_awarded,
        )
        return update, self._current_streaks(streak), milestone_progress

    async def check_achievements(
        self,
        user_id: UUID,
        session: AsyncSession,
        dream_length: int = 0,
        streaks: Optional[Dict[str, int]] = None,
    ) -> AchievementCheck:
        """Unlock every active achievement the user now qualifies for.

        ``dream_length`` is the length of the dream just logged, if any.
        ``streaks`` maps streak type to its current value and is read from
        the store when omitted. The combined XP reward is awarded in one go.
        """
        catalogue = await self._repo.list_active_achievements(session)
        if not catalogue:
            return AchievementCheck()
        unlocked = {ua.achievement_id for ua in await self._repo.list_user_achievements(user_id, session)}
        candidates = [a for a in catalogue if a.id not in unlocked]
        if not candidates:
            return AchievementCheck()

        facts = await self._facts(user_id, session, dream_length, streaks)
        newly_unlocked: List[str] = []
        xp_gained = 0
        for achievement in candidates:
            if not achievement_met(achievement.criteria or {}, facts):
                continue
            await self._repo.unlock_achievement(user_id, achievement.id, session)
            newly_unlocked.append(achievement.code)
            xp_gained += achievement.xp_reward or 0
            logger.info(f"[gamification] user {user_id} unlocked achievement {achievement.code}")

        if xp_gained <= 0:
            return AchievementCheck(newly_unlocked=tuple(newly_unlocked))
        progress = await self.award_xp(user_id, xp_gained, "Achievements unlocked", session)
        return AchievementCheck(
            newly_unlocked=tuple(newly_unlocked),
            xp_gained=xp_gained,
            level_up=progress.level_up,
            new_level=progress.level,
        )

    async def list_achievements(
        self,
        user_id: UUID,
        session: AsyncSession,
        category: Optional[str] = None,
        tier: Optional[str] = None,
    ) -> List[AchievementStatus]:
        """Catalogue with the user's unlock state; hidden entries appear once unlocked."""
        catalogue = await self._repo.list_active_achievements(session, category=category, tier=tier)
        owned = {ua.achievement_id: ua for ua in await self._repo.list_user_achievements(user_id, session)}
        facts = await self._facts(user_id, session, 0, None)

        statuses = []
        for achievement in catalogue:
            record = owned.get(achievement.id)
            if achievement.is_hidden and record is None:
                continue
            statuses.append(AchievementStatus(
                achievement=achievement,
                is_unlocked=record is not None,
                unlocked_at=record.unlocked_at if record else None,
                is_viewed=bool(record.is_viewed) if record else False,
                progress=100 if record else achievement_progress(achievement.criteria or {}, facts),
            ))
        return statuses

    async def get_progress(
        self, user_id: UUID, session: AsyncSession
    ) -> Tuple[LevelProgress, UserStreak]:
        level = await self._repo.get_level(user_id, session)
        streak = await self._repo.get_streak(user_id, session)
        return self._progress_from(level), streak or self._new_streak(user_id)

    async def record_dream_logged(
        self, user_id: UUID, dream_text: str, session: AsyncSession
    ) -> DreamLoggedRewards:
        """Award dream XP, advance the dream streak and check achievements for a newly saved dream."""
        xp = xp_for_dream(dream_text)
        reason = "Detailed dream logged" if xp == DETAILED_DREAM_XP else "Dream logged"
        progress = await self.award_xp(user_id, xp, reason, session)
        streak, streaks, milestone_progress = await self._record_streak(
            user_id, StreakType.DREAM.value, session, None
        )
        check = await self.check_achievements(user_id, session, dream_length=len(dream_text), streaks=streaks)

        level_up = progress.level_up
        new_level = progress.level
        if milestone_progress is not None:
            level_up = level_up or milestone_progress.level_up
            new_level = milestone_progress.level
        if check.new_level is not None:
            level_up = level_up or check.level_up
            new_level = check.new_level
        return DreamLoggedRewards(
            xp_awarded=xp,
            level_up=level_up,
            new_level=new_level,
            streak=streak.current_streak,
            streak_milestone=streak.milestone,
            achievements_unlocked=check.newly_unlocked,
        )

    # ─────────────────────────────── helpers ─────────────────────────────── #

    @staticmethod
    def _progress_from(level: Optional[UserLevel]) -> LevelProgress:
        if level is None:
            return starting_progress()
        return LevelProgress(
            total_xp=level.total_xp,
            level=level.current_level,
            next_level_xp=level.next_level_xp,
            title=level.current_title,
        )

    async def _facts(
        self,
        user_id: UUID,
        session: AsyncSession,
        dream_length: int,
        streaks: Optional[Dict[str, int]],
    ) -> AchievementFacts:
        if streaks is None:
            streak = await self._repo.get_streak(user_id, session)
            streaks = self._current_streaks(streak or self._new_streak(user_id))
        return AchievementFacts(
            dream_count=await self._repo.count_dreams(user_id, session),
            streaks=streaks,
            dream_length=dream_length,
        )

    @staticmethod
    def _current_streaks(streak: UserStreak) -> Dict[str, int]:
        return {kind.value: getattr(streak, f"current_{kind.value}_streak") or 0 for kind in StreakType}

    @staticmethod
    def _new_streak(user_id: UUID) -> UserStreak:
        return UserStreak(
            user_id=user_id,
            current_dream_streak=0, longest_dream_streak=0, last_dream_date=None,
            current_mood_streak=0, longest_mood_streak=0, last_mood_date=None,
            current_wellness_streak=0, longest_wellness_streak=0, last_wellness_date=None,
        )

    @staticmethod
    def _advance(streak: UserStreak, kind: StreakType, activity_date: date):
        prefix = kind.value
        step = advance_streak(
            current=getattr(streak, f"current_{prefix}_streak") or 0,
            longest=getattr(streak, f"longest_{prefix}_streak") or 0,
            last_date=getattr(streak, f"last_{prefix}_date"),
            activity_date=activity_date,
        )
        setattr(streak, f"current_{prefix}_streak", step.current)
        setattr(streak, f"longest_{prefix}_streak", step.longest)
        setattr(streak, f"last_{prefix}_date", step.last_date)
        return step
