"""Repository interface for XP levels, streaks and achievements."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.gamification.entities import Achievement, UserAchievement, UserLevel, UserStreak


class GamificationRepository(ABC):
    """Abstract repository for gamification state."""

    @abstractmethod
    async def get_level(self, user_id: UUID, session: AsyncSession) -> Optional[UserLevel]:
        """Get the user's level record, if any."""
        pass

    @abstractmethod
    async def save_level(self, level: UserLevel, session: AsyncSession) -> UserLevel:
        """Insert or update a level record."""
        pass

    @abstractmethod
    async def get_streak(self, user_id: UUID, session: AsyncSession) -> Optional[UserStreak]:
        """Get the user's streak record, if any."""
        pass

    @abstractmethod
    async def save_streak(self, streak: UserStreak, session: AsyncSession) -> UserStreak:
        """Insert or update a streak record."""
        pass

    @abstractmethod
    async def list_active_achievements(
        self,
        session: AsyncSession,
        category: Optional[str] = None,
        tier: Optional[str] = None,
    ) -> List[Achievement]:
        """Active catalogue entries in display order, optionally filtered."""
        pass

    @abstractmethod
    async def list_user_achievements(self, user_id: UUID, session: AsyncSession) -> List[UserAchievement]:
        pass

    @abstractmethod
    async def unlock_achievement(self, user_id: UUID, achievement_id: UUID, session: AsyncSession) -> None:
        """Record an unlock; unlocking twice is a no-op."""
        pass

    @abstractmethod
    async def count_dreams(self, user_id: UUID, session: AsyncSession) -> int:
        pass
