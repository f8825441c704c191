"""Application layer orchestrating Dream use-cases.

All db persistence is delegated to DreamRepository and the LLM is reached
through the injected port. Pattern maths lives in services.patterns; this
layer only fetches, delegates and maps failures onto the domain errors.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.context.dream.builder import DreamContextBuilder
from lucid_backend.domain.dream.entities.dream import Dream
from lucid_backend.domain.dream.repo import DreamRepository
from lucid_backend.domain.errors import NotFoundError, UpstreamFailure, ValidationError
from lucid_backend.domain.ports.llm import LLMService
from lucid_backend.services.dream.interpretation import ParsedInterpretation, parse_interpretation_response
from lucid_backend.services.gamification.service import DreamLoggedRewards, GamificationService
from lucid_backend.services.patterns.aggregator import DreamPatterns, aggregate_patterns

logger = logging.getLogger(__name__)


@dataclass
class InterpretationResult:
    parsed: ParsedInterpretation
    saved_dream: Optional[Dream] = None
    rewards: Optional[DreamLoggedRewards] = None


class DreamService:
    def __init__(
        self,
        dream_repo: DreamRepository,
        context_builder: DreamContextBuilder,
        interpretation_llm: LLMService,
        gamification: Optional[GamificationService] = None,
    ) -> None:
        self._repo = dream_repo
        self._context_builder = context_builder
        self._llm = interpretation_llm
        self._gamification = gamification

    # ─────────────────────────────── dreams ──────────────────────────────── #

    async def list_dreams(self, user_id: UUID, session: AsyncSession) -> List[Dream]:
        return await self._repo.list_dreams_by_user(user_id, session)

    async def get_dream(self, user_id: UUID, did: UUID, session: AsyncSession) -> Dream:
        dream = await self._repo.get_dream(user_id, did, session)
        if not dream:
            raise NotFoundError("Dream not found")
        return dream

    async def delete_dream(self, user_id: UUID, did: UUID, session: AsyncSession) -> None:
        if not await self._repo.delete_dream(user_id, did, session):
            raise NotFoundError("Dream not found")
        logger.info(f"Deleted dream {did} for user {user_id}")

    # ─────────────────────────────── patterns ────────────────────────────── #

    async def get_patterns(
        self, user_id: UUID, session: AsyncSession, now: Optional[datetime] = None
    ) -> DreamPatterns:
        dreams = await self._repo.list_dreams_by_user(user_id, session)
        return aggregate_patterns(dreams, now or datetime.utcnow())

    # ─────────────────────────── interpretation ──────────────────────────── #

    async def interpret_dream(
        self,
        user_id: UUID,
        dream_text: str,
        session: AsyncSession,
        sleep_hours: Optional[float] = None,
        save_to_history: bool = False,
    ) -> InterpretationResult:
        """Interpret a dream, optionally saving it and crediting XP / streaks."""
        if not dream_text or not dream_text.strip():
            raise ValidationError("Dream text is required")

        context_window = await self._context_builder.build_for_interpretation(
            user_id=user_id,
            dream_text=dream_text,
            session=session,
            sleep_hours=sleep_hours,
        )
        messages = self._context_builder.prepare_llm_messages(context_window)
        logger.debug(f"Interpretation context for user {user_id}: ~{context_window.estimate_tokens()} tokens")

        try:
            response_text = await self._llm.generate_response(messages)
        except Exception as e:
            logger.error(f"Interpretation LLM call failed for user {user_id}: {str(e)}")
            raise UpstreamFailure("Failed to interpret dream") from e

        parsed = parse_interpretation_response(response_text)
        result = InterpretationResult(parsed=parsed)
        if not save_to_history:
            return result

        dream = Dream(
            id=uuid.uuid4(),
            content=dream_text,
            sleep_hours=sleep_hours,
            created_at=datetime.utcnow(),
            interpretation=parsed.full_interpretation,
            jungian_analysis=parsed.jungian_analysis,
            freudian_analysis=parsed.freudian_analysis,
            cognitive_analysis=parsed.cognitive_analysis,
            synthesized_analysis=parsed.synthesized_analysis,
            reflection_questions=parsed.reflection_questions,
            **parsed.labels(),
        )
        result.saved_dream = await self._repo.create_dream(user_id, dream, session)
        logger.info(f"Saved dream {dream.id} for user {user_id}")

        if self._gamification is not None:
            try:
                result.rewards = await self._gamification.record_dream_logged(user_id, dream_text, session)
            except Exception as e:
                # the dream is already saved; rewards are best-effort
                logger.error(f"Gamification update failed for dream {dream.id}: {str(e)}")
        return result
