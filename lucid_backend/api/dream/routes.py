# lucid_backend/api/dream/routes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from typing import List
import logging

from lucid_backend.domain.errors import NotFoundError, UpstreamFailure, ValidationError
from lucid_backend.services.dream.service import DreamService, InterpretationResult
from lucid_backend.dependencies import (
    get_session,
    get_dream_service,
    get_current_user_id,
)
from .schemas import (
    DreamRead,
    DreamPatternsResponse,
    ExtractedPatterns,
    GamificationSummary,
    InterpretDreamRequest,
    InterpretDreamResponse,
    Perspectives,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dreams",
    tags=["dreams"]
)

# ─────────────────────────────── dreams ─────────────────────────────── #

@router.get("/", response_model=List[DreamRead])
async def list_dreams(
    svc: DreamService = Depends(get_dream_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    try:
        dreams = await svc.list_dreams(user_id, db)
        return [DreamRead.model_validate(dream) for dream in dreams]
    except Exception as e:
        logger.error(f"Error fetching dreams for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch dream history"
        )


@router.post("/interpret", response_model=InterpretDreamResponse)
async def interpret_dream(
    payload: InterpretDreamRequest,
    svc: DreamService = Depends(get_dream_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    """Interpret a dream from several psychological perspectives, optionally saving it."""
    logger.info(f"[dreams] interpret: user={user_id} chars={len(payload.dream)} save={payload.save_to_history}")
    try:
        result = await svc.interpret_dream(
            user_id=user_id,
            dream_text=payload.dream,
            session=db,
            sleep_hours=payload.sleep_hours,
            save_to_history=payload.save_to_history,
        )
        return _interpretation_response(result)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to interpret dream. Please try again."
        )
    except Exception as e:
        logger.error(f"Dream interpretation error for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to interpret dream. Please try again."
        )


@router.get("/patterns", response_model=DreamPatternsResponse)
async def get_patterns(
    svc: DreamService = Depends(get_dream_service),
    db: AsyncSession = Depends(get_session),
    user_id: UUID = Depends(get_current_user_id)
):
    """Recurring symbols, emotions, themes and sleep statistics across the user's dreams."""
    try:
        patterns = await svc.get_patterns(user_id, db)
        return DreamPatternsResponse.model_validate(patterns)
    except Exception as e:
        logger.error(f"Error analysing dream patterns for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze dream patterns"
        )


@router.get("/{did}", response_model=DreamRead)
async def read_dream(
    did: UUID,
    user_id: UUID = Depends(get_current_user_id),
    svc: DreamService = Depends(get_dream_service),
    db: AsyncSession = Depends(get_session),
):
    try:
        dream = await svc.get_dream(user_id, did, db)
        return DreamRead.model_validate(dream)
    except NotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Dream not found")
    except Exception as e:
        logger.error(f"Error retrieving dream {did} for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve dream"
        )


@router.delete("/{did}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dream(
    did: UUID,
    user_id: UUID = Depends(get_current_user_id),
    svc: DreamService = Depends(get_dream_service),
    db: AsyncSession = Depends(get_session),
):
    try:
        await svc.delete_dream(user_id, did, db)
    except NotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Dream not found")
    except Exception as e:
        logger.error(f"Error deleting dream {did} for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete dream"
        )


def _interpretation_response(result: InterpretationResult) -> InterpretDreamResponse:
    parsed = result.parsed
    gamification = None
    if result.rewards is not None:
        gamification = GamificationSummary(
            xp_awarded=result.rewards.xp_awarded,
            level_up=result.rewards.level_up,
            new_level=result.rewards.new_level,
            streak_count=result.rewards.streak,
            streak_milestone=result.rewards.streak_milestone,
            achievements_unlocked=list(result.rewards.achievements_unlocked),
        )
    return InterpretDreamResponse(
        interpretation=parsed.synthesized_analysis or parsed.full_interpretation,
        full_interpretation=parsed.full_interpretation,
        perspectives=Perspectives(
            jungian=parsed.jungian_analysis,
            freudian=parsed.freudian_analysis,
            cognitive=parsed.cognitive_analysis,
            synthesized=parsed.synthesized_analysis,
        ),
        patterns=ExtractedPatterns(**parsed.labels()),
        reflection_questions=parsed.reflection_questions,
        saved_dream=DreamRead.model_validate(result.saved_dream) if result.saved_dream is not None else None,
        gamification=gamification,
    )
