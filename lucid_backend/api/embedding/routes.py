# lucid_backend/api/embedding/routes.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from typing import Optional
import logging

from lucid_backend.api.dream.schemas import DreamRead
from lucid_backend.domain.errors import NotFoundError, UpstreamFailure
from lucid_backend.services.embedding.service import EmbeddingService
from lucid_backend.dependencies import (
    get_session,
    get_embedding_service,
    get_current_user_id,
)
from .schemas import (
    BatchEmbeddingResponse,
    GenerateEmbeddingRequest,
    GenerateEmbeddingResponse,
    SimilarDreamRead,
    SimilarDreamsResponse,
)

logger = logging.getLogger(__name__)

MAX_SIMILAR = 50

router = APIRouter(
    prefix="/embeddings",
    tags=["embeddings"]
)

similar_router = APIRouter(
    prefix="/similar-dreams",
    tags=["embeddings"]
)


@router.post("/", response_model=GenerateEmbeddingResponse)
async def generate_embedding(
    request: GenerateEmbeddingRequest,
    session: AsyncSession = Depends(get_session),
    svc: EmbeddingService = Depends(get_embedding_service),
    user_id: UUID = Depends(get_current_user_id)
):
    """Generate (or regenerate) the embedding for one dream."""
    if request.dream_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Dream ID required")
    try:
        logger.info(f"[embeddings] generate: user={user_id} dream={request.dream_id}")
        record = await svc.generate_for_dream(user_id, request.dream_id, session)
        return GenerateEmbeddingResponse(
            success=True,
            dream_id=request.dream_id,
            embedding_dimension=len(record.vector),
            model=record.model,
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dream not found")
    except UpstreamFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate embedding"
        )
    except Exception as e:
        logger.error(f"Error saving embedding for dream {request.dream_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save embedding"
        )


@router.put("/", response_model=BatchEmbeddingResponse)
async def generate_missing_embeddings(
    session: AsyncSession = Depends(get_session),
    svc: EmbeddingService = Depends(get_embedding_service),
    user_id: UUID = Depends(get_current_user_id)
):
    """Embed a batch of the user's dreams that do not have an embedding yet."""
    try:
        result = await svc.generate_missing(user_id, session)
    except Exception as e:
        logger.error(f"Failed to batch generate embeddings for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to batch generate embeddings"
        )

    if result.dreams_found == 0:
        message = "No dreams found"
    elif result.total == 0:
        message = "All dreams already have embeddings"
    else:
        message = "Batch processing complete"
    return BatchEmbeddingResponse(
        message=message,
        processed=result.processed,
        failed=result.failed,
        total=result.total if result.total else result.dreams_found,
        remaining=result.remaining,
        failed_dream_ids=result.failed_ids,
    )


@similar_router.get("/", response_model=SimilarDreamsResponse)
async def find_similar_dreams(
    dream_id: Optional[UUID] = Query(None),
    limit: int = Query(5),
    session: AsyncSession = Depends(get_session),
    svc: EmbeddingService = Depends(get_embedding_service),
    user_id: UUID = Depends(get_current_user_id)
):
    """Rank the user's other dreams by embedding similarity to ``dream_id``."""
    if dream_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Dream ID required")
    if limit < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="limit must be a positive integer")
    try:
        similar = await svc.find_similar(user_id, dream_id, session, limit=min(limit, MAX_SIMILAR))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to find similar dreams for dream {dream_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to find similar dreams"
        )

    similar_dreams = [
        SimilarDreamRead(
            **DreamRead.model_validate(r.metadata).model_dump(),
            similarity_score=r.similarity_score,
        )
        for r in similar.results
    ]
    return SimilarDreamsResponse(
        similar_dreams=similar_dreams,
        query_dream_id=similar.query_dream_id,
        total_compared=similar.total_compared,
        message=None if similar.total_compared else "No other dreams found",
    )
