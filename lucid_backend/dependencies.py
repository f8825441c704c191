# lucid_backend/dependencies.py

"""
Centralised FastAPI dependency providers.

Lifetimes
---------
* module-level singletons → created once at import time
* request-scoped objects  → yielded by functions that FastAPI wraps
"""

from __future__ import annotations

from typing import AsyncGenerator
from uuid import UUID

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.config import settings
from lucid_backend.context.dream.builder import DreamContextBuilder
from lucid_backend.infrastructure.db.bootstrap import get_session as get_db_session
from lucid_backend.infrastructure.implementations.dream.rds_dream_repository import RDSDreamRepository
from lucid_backend.infrastructure.implementations.dream.rds_embedding_repository import RDSEmbeddingRepository
from lucid_backend.infrastructure.implementations.gamification.rds_gamification_repository import RDSGamificationRepository
from lucid_backend.infrastructure.llm.openai_llm import OpenAIEmbedder, OpenAILLM
from lucid_backend.services.dream.service import DreamService
from lucid_backend.services.embedding.service import EmbeddingService
from lucid_backend.services.gamification.service import GamificationService

# ────────────────────────── singletons ─────────────────────────── #

_dream_repo = RDSDreamRepository()
_embedding_repo = RDSEmbeddingRepository()
_gamification_repo = RDSGamificationRepository()

_interpretation_llm = OpenAILLM(
    api_key=settings().openai_api_key,
    model=settings().interpretation_model,
    base_url=settings().openai_base_url,
    temperature=settings().interpretation_temperature,
    max_tokens=settings().interpretation_max_tokens,
)
_embedder = OpenAIEmbedder(
    api_key=settings().openai_api_key,
    model=settings().embedding_model,
)
_dream_context_builder = DreamContextBuilder(_dream_repo)

_gamification_service = GamificationService(_gamification_repo)
_dream_service = DreamService(_dream_repo, _dream_context_builder, _interpretation_llm, _gamification_service)
_embedding_service = EmbeddingService(
    _dream_repo, _embedding_repo, _embedder, batch_limit=settings().embedding_batch_limit
)

# ─────────────────────── DI provider helpers ───────────────────── #

def get_dream_service() -> DreamService:
    return _dream_service

def get_embedding_service() -> EmbeddingService:
    return _embedding_service

def get_gamification_service() -> GamificationService:
    return _gamification_service

# ───────────────────────── auth helpers ───────────────────────── #
_security = HTTPBearer()

async def get_current_user_id(
    token: HTTPAuthorizationCredentials = Depends(_security),
) -> UUID:
    """Return the user id carried by a JWT from the auth provider; 401 if invalid."""
    try:
        payload = jwt.decode(token.credentials, settings().jwt_secret, algorithms=[settings().jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    # Prefer our `uid` claim, fall back to the provider's `sub`
    raw = payload.get("uid") or payload.get("sub")
    if not raw:
        raise HTTPException(status_code=401, detail="Unknown user")
    try:
        return UUID(str(raw))
    except ValueError:
        raise HTTPException(status_code=401, detail="Unknown user")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped database session (async).

    Delegates to *lucid_backend.infrastructure.db.bootstrap.get_session* but
    preserves the required *async generator* signature so FastAPI can manage
    the lifecycle automatically (open → yield → close).
    """
    async for session in get_db_session():
        yield session
