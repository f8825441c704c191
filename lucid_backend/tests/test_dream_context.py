"""Tests for interpretation context building."""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from lucid_backend.context.dream import (
    DreamContextBuilder,
    DreamPrompts,
    InterpretationContextWindow,
)
from dream_test_utils import make_dream


@pytest_asyncio.fixture
async def mock_dream_repo():
    return AsyncMock()


@pytest_asyncio.fixture
async def context_builder(mock_dream_repo):
    return DreamContextBuilder(mock_dream_repo)


class TestInterpretationContextWindow:

    @pytest.mark.parametrize("hours, note", [
        (4.5, "Relatively little sleep"),
        (7, "Normal amount of sleep"),
        (10, "More sleep than average"),
    ])
    def test_sleep_context(self, hours, note):
        window = InterpretationContextWindow(user_id="u", dream_text="d", sleep_hours=hours)

        context = window.sleep_context()

        assert context.startswith(f"Sleep Context: {hours:g} hours of sleep.")
        assert note in context

    def test_no_sleep_hours(self):
        window = InterpretationContextWindow(user_id="u", dream_text="d")

        assert window.sleep_context() == ""

    def test_dream_patterns_context(self):
        window = InterpretationContextWindow(
            user_id="u",
            dream_text="d",
            recent_dream_count=3,
            recurring_symbols=["water", "door"],
            common_themes=["loss"],
        )

        assert window.dream_patterns_context() == (
            "Dream History (last 3 dreams): Recurring symbols: water, door. Common themes: loss."
        )

    def test_empty_history(self):
        window = InterpretationContextWindow(user_id="u", dream_text="d", recent_dream_count=2)

        assert window.dream_patterns_context() == ""

    def test_estimate_tokens(self):
        window = InterpretationContextWindow(user_id="u", dream_text="x" * 400)

        assert window.estimate_tokens() == 100


class TestDreamPrompts:

    def test_prompts_include_context(self):
        system, user = DreamPrompts.interpretation_prompts(
            sleep_context="Sleep Context: 5 hours of sleep.",
            dream_text="I was in a maze",
            dream_patterns_context="Dream History (last 1 dreams): Recurring symbols: maze.",
        )

        assert "**JUNGIAN PERSPECTIVE**" in system
        assert '"symbols"' in system
        assert "Sleep Context: 5 hours of sleep." in system
        assert "I was in a maze" in user
        assert "Recurring symbols: maze." in user


class TestDreamContextBuilder:

    @pytest.mark.asyncio
    async def test_builds_history_from_recent_dreams(self, context_builder, mock_dream_repo, user_id, mock_session):
        mock_dream_repo.list_dreams_by_user.return_value = [
            make_dream(symbols=["water", "door"], themes=["loss"], emotions=["fear"]),
            make_dream(symbols=["door"], themes=None, emotions=["fear", "calm"]),
        ]

        window = await context_builder.build_for_interpretation(
            user_id=user_id,
            dream_text="New dream",
            session=mock_session,
            sleep_hours=6.5,
        )

        mock_dream_repo.list_dreams_by_user.assert_awaited_once_with(user_id, mock_session, limit=30)
        assert window.recent_dream_count == 2
        assert window.recurring_symbols == ["door", "water"]
        assert window.common_themes == ["loss"]
        assert window.frequent_emotions == ["fear", "calm"]
        assert window.sleep_hours == 6.5

    @pytest.mark.asyncio
    async def test_history_is_capped_at_five_labels(self, context_builder, mock_dream_repo, user_id, mock_session):
        mock_dream_repo.list_dreams_by_user.return_value = [
            make_dream(symbols=[f"s{i}" for i in range(8)]),
        ]

        window = await context_builder.build_for_interpretation(user_id, "New dream", mock_session)

        assert window.recurring_symbols == ["s0", "s1", "s2", "s3", "s4"]

    @pytest.mark.asyncio
    async def test_prepare_llm_messages(self, context_builder, mock_dream_repo, user_id, mock_session):
        mock_dream_repo.list_dreams_by_user.return_value = []
        window = await context_builder.build_for_interpretation(user_id, "Falling dream", mock_session)

        messages = context_builder.prepare_llm_messages(window)

        assert [m["role"] for m in messages] == ["system", "user"]
        assert "Falling dream" in messages[1]["content"]
