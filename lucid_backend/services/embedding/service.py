"""Embedding generation and similar-dream lookup."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.dream.entities.dream import Dream
from lucid_backend.domain.dream.entities.embedding import DreamEmbedding
from lucid_backend.domain.dream.repo import DreamRepository, EmbeddingRepository
from lucid_backend.domain.errors import NotFoundError, UpstreamFailure
from lucid_backend.domain.ports.llm import EmbeddingProvider
from lucid_backend.services.similarity.ranker import (
    DEFAULT_LIMIT,
    RankCandidate,
    RankedResult,
    rank_by_similarity,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_LIMIT = 10


@dataclass
class BatchEmbeddingResult:
    processed: int = 0
    failed: int = 0
    total: int = 0
    remaining: int = 0
    dreams_found: int = 0
    failed_ids: List[UUID] = field(default_factory=list)


@dataclass
class SimilarDreams:
    query_dream_id: UUID
    results: List[RankedResult[Dream]]
    total_compared: int


def build_embedding_text(dream: Any) -> str:
    """Content, interpretation, then the extracted labels, space separated."""
    parts = [
        dream.content,
        dream.interpretation,
        *(dream.symbols or []),
        *(dream.emotions or []),
        *(dream.themes or []),
    ]
    return " ".join(p for p in parts if p)


class EmbeddingService:
    def __init__(
        self,
        dream_repo: DreamRepository,
        embedding_repo: EmbeddingRepository,
        embedder: EmbeddingProvider,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
    ) -> None:
        self._dreams = dream_repo
        self._embeddings = embedding_repo
        self._embedder = embedder
        self._batch_limit = batch_limit

    async def generate_for_dream(
        self, user_id: UUID, dream_id: UUID, session: AsyncSession
    ) -> DreamEmbedding:
        """Embed one dream and store it, replacing any previous vector."""
        dream = await self._dreams.get_dream(user_id, dream_id, session)
        if not dream:
            raise NotFoundError("Dream not found")
        vector = await self._embed(dream.id, build_embedding_text(dream))
        return await self._embeddings.upsert_embedding(dream.id, vector, self._embedder.model, session)

    async def generate_missing(self, user_id: UUID, session: AsyncSession) -> BatchEmbeddingResult:
        """Embed up to ``batch_limit`` of the user's dreams that have no vector yet.

        A failure on one dream is logged and counted; the rest of the batch
        still runs. Texts are captured before the first write because a
        rollback expires every loaded Dream.
        """
        dreams = await self._dreams.list_dreams_by_user(user_id, session)
        if not dreams:
            return BatchEmbeddingResult()

        existing = await self._embeddings.list_dream_ids_with_embeddings(user_id, session)
        pending = [d for d in dreams if d.id not in existing]
        result = BatchEmbeddingResult(
            total=len(pending),
            remaining=max(0, len(pending) - self._batch_limit),
            dreams_found=len(dreams),
        )
        batch = [(d.id, build_embedding_text(d)) for d in pending[: self._batch_limit]]

        for dream_id, text in batch:
            try:
                vector = await self._embed(dream_id, text)
            except UpstreamFailure:
                result.failed += 1
                result.failed_ids.append(dream_id)
                continue
            try:
                await self._embeddings.upsert_embedding(dream_id, vector, self._embedder.model, session)
            except Exception as e:
                logger.error(f"Failed to store embedding for dream {dream_id}: {str(e)}")
                await session.rollback()
                result.failed += 1
                result.failed_ids.append(dream_id)
                continue
            result.processed += 1

        logger.info(f"[embeddings] batch for user {user_id}: processed={result.processed} failed={result.failed} remaining={result.remaining}")
        return result

    async def find_similar(
        self,
        user_id: UUID,
        dream_id: UUID,
        session: AsyncSession,
        limit: int = DEFAULT_LIMIT,
    ) -> SimilarDreams:
        query = await self._embeddings.get_embedding(user_id, dream_id, session)
        if query is None:
            raise NotFoundError("Embedding not found for this dream. Generate embeddings first.")

        rows = await self._embeddings.list_dreams_with_embeddings(user_id, dream_id, session)
        candidates = [
            RankCandidate(
                id=dream.id,
                vector=embedding.vector if embedding is not None else None,
                model=embedding.model if embedding is not None else None,
                metadata=dream,
            )
            for dream, embedding in rows
        ]
        ranked = rank_by_similarity(query.vector, candidates, limit=limit, model=query.model)
        return SimilarDreams(query_dream_id=dream_id, results=ranked, total_compared=len(rows))

    async def _embed(self, dream_id: UUID, text: str) -> List[float]:
        try:
            return await self._embedder.embed(text)
        except Exception as e:
            logger.error(f"Embedding provider failed for dream {dream_id}: {str(e)}")
            raise UpstreamFailure("Failed to generate embedding") from e
