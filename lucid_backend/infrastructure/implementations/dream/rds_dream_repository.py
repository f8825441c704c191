# lucid_backend/infrastructure/implementations/dream/rds_dream_repository.py
from __future__ import annotations

import logging
import time
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from lucid_backend.domain.dream.entities.dream import Dream
from lucid_backend.domain.dream.repo import DreamRepository

logger = logging.getLogger(__name__)


class RDSDreamRepository(DreamRepository):
    """Async SQLAlchemy implementation; every query is scoped to the owning user."""

    async def create_dream(self, user_id: UUID, dream: Dream, session: AsyncSession) -> Dream:
        """Insert dream; if already exists return existing (idempotent)."""
        try:
            dream.user_id = user_id
            session.add(dream)
            await session.commit()
            await session.refresh(dream)
            return dream
        except IntegrityError:
            await session.rollback()
            return await self.get_dream(user_id, dream.id, session)

    async def get_dream(self, user_id: UUID, did: UUID, session: AsyncSession) -> Optional[Dream]:
        stmt = select(Dream).where(and_(Dream.id == did, Dream.user_id == user_id))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_dreams_by_user(
        self, user_id: UUID, session: AsyncSession, limit: Optional[int] = None
    ) -> List[Dream]:
        query = (
            select(Dream)
            .where(Dream.user_id == user_id)
            .order_by(Dream.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)

        start = time.time()
        result = await session.execute(query)
        dreams = list(result.scalars().all())
        logger.debug(f"Listed {len(dreams)} dreams for user {user_id} in {(time.time() - start) * 1000:.2f}ms")
        return dreams

    async def delete_dream(self, user_id: UUID, did: UUID, session: AsyncSession) -> bool:
        # dream_embeddings rows go with it via ON DELETE CASCADE
        result = await session.execute(
            delete(Dream).where(and_(Dream.id == did, Dream.user_id == user_id))
        )
        await session.commit()
        return result.rowcount > 0
