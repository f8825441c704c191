"""PostgreSQL / pgvector implementation of EmbeddingRepository."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Set, Tuple
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.dream.entities.dream import Dream
from lucid_backend.domain.dream.entities.embedding import DreamEmbedding
from lucid_backend.domain.dream.repo import EmbeddingRepository


class RDSEmbeddingRepository(EmbeddingRepository):
    """Stores one vector per dream; regeneration replaces the row wholesale."""

    async def upsert_embedding(
        self,
        dream_id: UUID,
        vector: Sequence[float],
        model: str,
        session: AsyncSession,
    ) -> DreamEmbedding:
        values = {
            "embedding": list(vector),
            "model": model,
            "created_at": datetime.utcnow(),
        }
        stmt = (
            insert(DreamEmbedding)
            .values(dream_id=dream_id, **values)
            .on_conflict_do_update(index_elements=[DreamEmbedding.dream_id], set_=values)
            .returning(DreamEmbedding)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        await session.commit()
        return result.scalar_one()

    async def get_embedding(
        self, user_id: UUID, dream_id: UUID, session: AsyncSession
    ) -> Optional[DreamEmbedding]:
        stmt = (
            select(DreamEmbedding)
            .join(Dream, Dream.id == DreamEmbedding.dream_id)
            .where(and_(DreamEmbedding.dream_id == dream_id, Dream.user_id == user_id))
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_dream_ids_with_embeddings(
        self, user_id: UUID, session: AsyncSession
    ) -> Set[UUID]:
        stmt = (
            select(DreamEmbedding.dream_id)
            .join(Dream, Dream.id == DreamEmbedding.dream_id)
            .where(Dream.user_id == user_id)
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def list_dreams_with_embeddings(
        self, user_id: UUID, exclude_dream_id: Optional[UUID], session: AsyncSession
    ) -> List[Tuple[Dream, Optional[DreamEmbedding]]]:
        stmt = (
            select(Dream, DreamEmbedding)
            .outerjoin(DreamEmbedding, DreamEmbedding.dream_id == Dream.id)
            .where(Dream.user_id == user_id)
            .order_by(Dream.created_at.desc())
        )
        if exclude_dream_id is not None:
            stmt = stmt.where(Dream.id != exclude_dream_id)
        result = await session.execute(stmt)
        return [(dream, embedding) for dream, embedding in result.all()]
