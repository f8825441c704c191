"""PostgreSQL implementation of GamificationRepository."""
from __future__ import annotations
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.dream.entities.dream import Dream
from lucid_backend.domain.gamification.entities import Achievement, UserAchievement, UserLevel, UserStreak
from lucid_backend.domain.gamification.repo import GamificationRepository


class RDSGamificationRepository(GamificationRepository):
    """PostgreSQL implementation of the gamification repository."""

    async def get_level(self, user_id: UUID, session: AsyncSession) -> Optional[UserLevel]:
        result = await session.execute(select(UserLevel).where(UserLevel.user_id == user_id))
        return result.scalar_one_or_none()

    async def save_level(self, level: UserLevel, session: AsyncSession) -> UserLevel:
        level = await session.merge(level)
        await session.commit()
        return level

    async def get_streak(self, user_id: UUID, session: AsyncSession) -> Optional[UserStreak]:
        result = await session.execute(select(UserStreak).where(UserStreak.user_id == user_id))
        return result.scalar_one_or_none()

    async def save_streak(self, streak: UserStreak, session: AsyncSession) -> UserStreak:
        streak = await session.merge(streak)
        await session.commit()
        return streak

    async def list_active_achievements(
        self,
        session: AsyncSession,
        category: Optional[str] = None,
        tier: Optional[str] = None,
    ) -> List[Achievement]:
        query = select(Achievement).where(Achievement.is_active.is_(True))
        if category:
            query = query.where(Achievement.category == category)
        if tier:
            query = query.where(Achievement.tier == tier)
        result = await session.execute(query.order_by(Achievement.sort_order))
        return list(result.scalars().all())

    async def list_user_achievements(self, user_id: UUID, session: AsyncSession) -> List[UserAchievement]:
        result = await session.execute(
            select(UserAchievement).where(UserAchievement.user_id == user_id)
        )
        return list(result.scalars().all())

    async def unlock_achievement(self, user_id: UUID, achievement_id: UUID, session: AsyncSession) -> None:
        stmt = (
            insert(UserAchievement)
            .values(user_id=user_id, achievement_id=achievement_id)
            .on_conflict_do_nothing(index_elements=["user_id", "achievement_id"])
        )
        await session.execute(stmt)
        await session.commit()

    async def count_dreams(self, user_id: UUID, session: AsyncSession) -> int:
        result = await session.execute(select(func.count(Dream.id)).where(Dream.user_id == user_id))
        return result.scalar_one()
