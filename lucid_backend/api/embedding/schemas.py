"""Pydantic schemas for embedding and similar-dream API."""

from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID

from lucid_backend.api.dream.schemas import DreamRead


class GenerateEmbeddingRequest(BaseModel):
    """Optional here so a missing id is reported as 400 rather than 422."""
    dream_id: Optional[UUID] = Field(None, description="Dream to embed")


class GenerateEmbeddingResponse(BaseModel):
    success: bool
    dream_id: UUID
    embedding_dimension: int
    model: str


class BatchEmbeddingResponse(BaseModel):
    message: str
    processed: int
    failed: int = 0
    total: int = 0
    remaining: int = 0
    failed_dream_ids: List[UUID] = []


class SimilarDreamRead(DreamRead):
    similarity_score: float = Field(..., ge=-1.0, le=1.0)


class SimilarDreamsResponse(BaseModel):
    similar_dreams: List[SimilarDreamRead]
    query_dream_id: UUID
    total_compared: int
    message: Optional[str] = None
