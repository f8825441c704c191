"""Dream context builder gathers the dreamer's history for interpretation."""

import logging
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from lucid_backend.domain.dream.repo import DreamRepository
from lucid_backend.services.patterns.aggregator import top_labels
from .context_window import InterpretationContextWindow
from .prompts import DreamPrompts

logger = logging.getLogger(__name__)

RECENT_DREAMS = 30
HISTORY_LABELS = 5


class DreamContextBuilder:
    """Orchestrates context building for dream interpretation."""

    def __init__(self, dream_repo: DreamRepository):
        self._repo = dream_repo

    async def build_for_interpretation(
        self,
        user_id: UUID,
        dream_text: str,
        session: AsyncSession,
        sleep_hours: Optional[float] = None,
    ) -> InterpretationContextWindow:
        """Build context from the new dream plus the user's most recent dreams."""
        recent = await self._repo.list_dreams_by_user(user_id, session, limit=RECENT_DREAMS)
        logger.debug(f"Building interpretation context for user {user_id} from {len(recent)} recent dreams")

        return InterpretationContextWindow(
            user_id=str(user_id),
            dream_text=dream_text,
            sleep_hours=sleep_hours,
            recent_dream_count=len(recent),
            recurring_symbols=[e.label for e in top_labels(recent, "symbols", HISTORY_LABELS)],
            common_themes=[e.label for e in top_labels(recent, "themes", HISTORY_LABELS)],
            frequent_emotions=[e.label for e in top_labels(recent, "emotions", HISTORY_LABELS)],
        )

    def prepare_llm_messages(self, context_window: InterpretationContextWindow) -> List[Dict[str, str]]:
        system, user = DreamPrompts.interpretation_prompts(
            sleep_context=context_window.sleep_context(),
            dream_text=context_window.dream_text,
            dream_patterns_context=context_window.dream_patterns_context(),
        )
        return context_window.to_llm_messages(system, user)
