# lucid_backend/api/gamification/routes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List, Optional
from uuid import UUID
import logging

from lucid_backend.domain.errors import ValidationError
from lucid_backend.domain.gamification.entities import UserStreak
from lucid_backend.services.gamification.service import AchievementStatus, GamificationService
from lucid_backend.dependencies import (
    get_session,
    get_gamification_service,
    get_current_user_id,
)
from .schemas import (
    AchievementRead,
    AchievementsResponse,
    AddXPRequest,
    AddXPResponse,
    LevelRead,
    ProgressResponse,
    StreakRead,
    UpdateStreakRequest,
    UpdateStreakResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/gamification",
    tags=["gamification"]
)


@router.post("/add-xp", response_model=AddXPResponse)
async def add_xp(
    payload: AddXPRequest,
    svc: GamificationService = Depends(get_gamification_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    try:
        progress = await svc.award_xp(user_id, payload.amount, payload.reason, db)
        return AddXPResponse(
            total_xp=progress.total_xp,
            new_level=progress.level,
            level_up=progress.level_up,
            title=progress.title,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding XP for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add XP"
        )


@router.post("/update-streak", response_model=UpdateStreakResponse)
async def update_streak(
    payload: UpdateStreakRequest,
    svc: GamificationService = Depends(get_gamification_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    """Record today's activity and advance the matching streak."""
    try:
        update = await svc.update_streak(user_id, payload.streak_type, db)
        return UpdateStreakResponse(
            streak_type=update.streak_type,
            current_streak=update.current_streak,
            longest_streak=update.longest_streak,
            is_new_record=update.is_new_record,
            milestone=update.milestone,
            xp_awarded=update.xp_awarded,
            achievements_unlocked=list(update.achievements_unlocked),
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating {payload.streak_type} streak for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update streak"
        )


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(
    svc: GamificationService = Depends(get_gamification_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    try:
        progress, streak = await svc.get_progress(user_id, db)
        return ProgressResponse(
            level=LevelRead(
                total_xp=progress.total_xp,
                current_level=progress.level,
                next_level_xp=progress.next_level_xp,
                title=progress.title,
            ),
            dream_streak=_streak_read(streak, "dream"),
            mood_streak=_streak_read(streak, "mood"),
            wellness_streak=_streak_read(streak, "wellness"),
        )
    except Exception as e:
        logger.error(f"Error fetching progress for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch progress"
        )


@router.get("/achievements", response_model=AchievementsResponse)
async def list_achievements(
    category: Optional[str] = Query(None),
    tier: Optional[str] = Query(None),
    svc: GamificationService = Depends(get_gamification_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    """Achievement catalogue with the user's unlock state and progress."""
    try:
        statuses = await svc.list_achievements(user_id, db, category=category, tier=tier)
        achievements = [_achievement_read(s) for s in statuses]
        grouped: Dict[str, List[AchievementRead]] = {}
        for item in achievements:
            grouped.setdefault(item.category, []).append(item)
        return AchievementsResponse(
            achievements=achievements,
            grouped=grouped,
            total=len(achievements),
            unlocked=sum(1 for a in achievements if a.is_unlocked),
        )
    except Exception as e:
        logger.error(f"Error fetching achievements for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch achievements"
        )


def _streak_read(streak: UserStreak, prefix: str) -> StreakRead:
    return StreakRead(
        current=getattr(streak, f"current_{prefix}_streak") or 0,
        longest=getattr(streak, f"longest_{prefix}_streak") or 0,
        last_date=getattr(streak, f"last_{prefix}_date"),
    )


def _achievement_read(entry: AchievementStatus) -> AchievementRead:
    a = entry.achievement
    return AchievementRead(
        id=a.id,
        code=a.code,
        name=a.name,
        description=a.description,
        icon=a.icon,
        category=a.category,
        tier=a.tier,
        xp_reward=a.xp_reward or 0,
        is_unlocked=entry.is_unlocked,
        unlocked_at=entry.unlocked_at,
        is_viewed=entry.is_viewed,
        progress=entry.progress,
    )
