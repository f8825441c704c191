"""Port interfaces for dream and embedding persistence."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Set, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.dream.entities.dream import Dream
from lucid_backend.domain.dream.entities.embedding import DreamEmbedding


class DreamRepository(ABC):
    """Hexagonal port: persistence operations for the Dream aggregate."""

    @abstractmethod
    async def create_dream(self, user_id: UUID, dream: Dream, session: AsyncSession) -> Dream: ...

    @abstractmethod
    async def get_dream(self, user_id: UUID, did: UUID, session: AsyncSession) -> Optional[Dream]: ...

    @abstractmethod
    async def list_dreams_by_user(
        self, user_id: UUID, session: AsyncSession, limit: Optional[int] = None
    ) -> List[Dream]:
        """Newest first; ``limit=None`` returns everything."""

    @abstractmethod
    async def delete_dream(self, user_id: UUID, did: UUID, session: AsyncSession) -> bool: ...


class EmbeddingRepository(ABC):
    """Hexagonal port: persistence for dream embeddings.

    Vectors cross this boundary as plain ``list[float]``; any storage
    encoding is the implementation's business.
    """

    @abstractmethod
    async def upsert_embedding(
        self,
        dream_id: UUID,
        vector: Sequence[float],
        model: str,
        session: AsyncSession,
    ) -> DreamEmbedding: ...

    @abstractmethod
    async def get_embedding(
        self, user_id: UUID, dream_id: UUID, session: AsyncSession
    ) -> Optional[DreamEmbedding]: ...

    @abstractmethod
    async def list_dream_ids_with_embeddings(
        self, user_id: UUID, session: AsyncSession
    ) -> Set[UUID]: ...

    @abstractmethod
    async def list_dreams_with_embeddings(
        self, user_id: UUID, exclude_dream_id: Optional[UUID], session: AsyncSession
    ) -> List[Tuple[Dream, Optional[DreamEmbedding]]]:
        """Every dream of the user paired with its embedding (``None`` when missing)."""
