"""HTTP-level tests: routes wired to mocked services, no database."""

import pytest
from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

from fastapi.testclient import TestClient
from jose import jwt

from lucid_backend.config import settings
from lucid_backend.dependencies import (
    get_current_user_id,
    get_dream_service,
    get_embedding_service,
    get_gamification_service,
    get_session,
)
from lucid_backend.domain.errors import NotFoundError, UpstreamFailure, ValidationError
from lucid_backend.main import app
from lucid_backend.services.dream.interpretation import parse_interpretation_response
from lucid_backend.services.dream.service import InterpretationResult
from lucid_backend.services.embedding.service import BatchEmbeddingResult, SimilarDreams
from lucid_backend.services.gamification.progression import LevelProgress, starting_progress
from lucid_backend.services.gamification.service import AchievementStatus, DreamLoggedRewards, StreakUpdate
from lucid_backend.services.patterns.aggregator import aggregate_patterns
from lucid_backend.services.similarity.ranker import RankedResult
from dream_test_utils import interpretation_text, make_dream

USER_ID = uuid4()


def stored_dream(**values):
    values.setdefault("symbols", [])
    values.setdefault("emotions", [])
    values.setdefault("themes", [])
    return make_dream(user_id=USER_ID, **values)


async def _override_session():
    yield AsyncMock()


@pytest.fixture
def dream_svc():
    return AsyncMock()


@pytest.fixture
def embedding_svc():
    return AsyncMock()


@pytest.fixture
def gamification_svc():
    return AsyncMock()


@pytest.fixture
def client(dream_svc, embedding_svc, gamification_svc):
    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_dream_service] = lambda: dream_svc
    app.dependency_overrides[get_embedding_service] = lambda: embedding_svc
    app.dependency_overrides[get_gamification_service] = lambda: gamification_svc
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthAndAuth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_invalid_token_is_rejected(self, client):
        del app.dependency_overrides[get_current_user_id]

        response = client.get("/dreams/", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_token_subject_becomes_user(self, client, dream_svc):
        del app.dependency_overrides[get_current_user_id]
        dream_svc.list_dreams.return_value = []
        token = jwt.encode({"sub": str(USER_ID)}, settings().jwt_secret, algorithm=settings().jwt_algorithm)

        response = client.get("/dreams/", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert dream_svc.list_dreams.await_args.args[0] == USER_ID


class TestDreamRoutes:

    def test_list_dreams(self, client, dream_svc):
        dream_svc.list_dreams.return_value = [stored_dream(content="Ocean", symbols=["water"])]

        response = client.get("/dreams/")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["content"] == "Ocean"
        assert body[0]["symbols"] == ["water"]

    def test_read_missing_dream(self, client, dream_svc):
        dream_svc.get_dream.side_effect = NotFoundError("Dream not found")

        response = client.get(f"/dreams/{uuid4()}")

        assert response.status_code == 404

    def test_delete_dream(self, client, dream_svc):
        response = client.delete(f"/dreams/{uuid4()}")

        assert response.status_code == 204

    def test_store_failure_is_generic_500(self, client, dream_svc):
        dream_svc.list_dreams.side_effect = RuntimeError("connection reset by 10.0.0.4")

        response = client.get("/dreams/")

        assert response.status_code == 500
        assert "10.0.0.4" not in response.text

    def test_interpret(self, client, dream_svc):
        dream_svc.interpret_dream.return_value = InterpretationResult(
            parsed=parse_interpretation_response(interpretation_text())
        )

        response = client.post("/dreams/interpret", json={"dream": "I was flying", "sleep_hours": 7})

        assert response.status_code == 200
        body = response.json()
        assert body["interpretation"] == "The dreamer is seeking freedom."
        assert body["perspectives"]["jungian"] == "Flight points to transcendence."
        assert body["patterns"]["symbols"] == ["flying", "water"]
        assert len(body["reflection_questions"]) == 2
        assert body["saved_dream"] is None

    def test_interpret_reports_rewards(self, client, dream_svc):
        dream_svc.interpret_dream.return_value = InterpretationResult(
            parsed=parse_interpretation_response(interpretation_text()),
            rewards=DreamLoggedRewards(
                xp_awarded=10, level_up=False, new_level=1, streak=1, streak_milestone=False,
                achievements_unlocked=("first_dream",),
            ),
        )

        response = client.post("/dreams/interpret", json={"dream": "I was flying", "save_to_history": True})

        assert response.status_code == 200
        gamification = response.json()["gamification"]
        assert gamification["xp_awarded"] == 10
        assert gamification["achievements_unlocked"] == ["first_dream"]

    def test_interpret_validation_error(self, client, dream_svc):
        dream_svc.interpret_dream.side_effect = ValidationError("Dream text is required")

        response = client.post("/dreams/interpret", json={"dream": " "})

        assert response.status_code == 400

    def test_interpret_upstream_failure(self, client, dream_svc):
        dream_svc.interpret_dream.side_effect = UpstreamFailure("Failed to interpret dream")

        response = client.post("/dreams/interpret", json={"dream": "I was flying"})

        assert response.status_code == 500

    def test_patterns(self, client, dream_svc):
        now = datetime(2024, 3, 20, 12, 0)
        dream_svc.get_patterns.return_value = aggregate_patterns(
            [
                stored_dream(symbols=["flying", "water"], sleep_hours=7.0, created_at=now - timedelta(days=1)),
                stored_dream(symbols=["flying"], created_at=now - timedelta(days=12)),
            ],
            now,
        )

        response = client.get("/dreams/patterns")

        assert response.status_code == 200
        body = response.json()
        assert body["total_dreams"] == 2
        assert body["top_symbols"][0] == {"label": "flying", "count": 2}
        assert body["dream_frequency"] == {"this_week": 1, "this_month": 2}
        assert body["sleep_chart"][0]["date"] == "Mar 19"


class TestEmbeddingRoutes:

    def test_generate_requires_dream_id(self, client, embedding_svc):
        response = client.post("/embeddings/", json={})

        assert response.status_code == 400
        embedding_svc.generate_for_dream.assert_not_awaited()

    def test_generate_missing_dream(self, client, embedding_svc):
        embedding_svc.generate_for_dream.side_effect = NotFoundError("Dream not found")

        response = client.post("/embeddings/", json={"dream_id": str(uuid4())})

        assert response.status_code == 404

    def test_generate(self, client, embedding_svc):
        dream_id = uuid4()
        embedding_svc.generate_for_dream.return_value = SimpleNamespace(
            vector=[0.0] * 1536, model="text-embedding-3-small"
        )

        response = client.post("/embeddings/", json={"dream_id": str(dream_id)})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["dream_id"] == str(dream_id)
        assert body["embedding_dimension"] == 1536

    @pytest.mark.parametrize("result, message", [
        (BatchEmbeddingResult(), "No dreams found"),
        (BatchEmbeddingResult(dreams_found=3), "All dreams already have embeddings"),
        (BatchEmbeddingResult(processed=2, total=2, dreams_found=3), "Batch processing complete"),
    ])
    def test_batch_messages(self, client, embedding_svc, result, message):
        embedding_svc.generate_missing.return_value = result

        response = client.put("/embeddings/")

        assert response.status_code == 200
        assert response.json()["message"] == message

    def test_batch_reports_failed_dreams(self, client, embedding_svc):
        failed_id = uuid4()
        embedding_svc.generate_missing.return_value = BatchEmbeddingResult(
            processed=1, failed=1, total=2, dreams_found=2, failed_ids=[failed_id]
        )

        response = client.put("/embeddings/")

        assert response.status_code == 200
        body = response.json()
        assert body["failed"] == 1
        assert body["failed_dream_ids"] == [str(failed_id)]

    def test_similar_requires_dream_id(self, client):
        response = client.get("/similar-dreams/")

        assert response.status_code == 400

    def test_similar_without_embedding(self, client, embedding_svc):
        embedding_svc.find_similar.side_effect = NotFoundError(
            "Embedding not found for this dream. Generate embeddings first."
        )

        response = client.get("/similar-dreams/", params={"dream_id": str(uuid4())})

        assert response.status_code == 404

    def test_similar_dreams(self, client, embedding_svc):
        query_id = uuid4()
        match = stored_dream(content="Ocean again")
        embedding_svc.find_similar.return_value = SimilarDreams(
            query_dream_id=query_id,
            results=[RankedResult(id=match.id, metadata=match, similarity_score=0.93)],
            total_compared=4,
        )

        response = client.get("/similar-dreams/", params={"dream_id": str(query_id), "limit": 500})

        assert response.status_code == 200
        body = response.json()
        assert body["query_dream_id"] == str(query_id)
        assert body["total_compared"] == 4
        assert body["similar_dreams"][0]["content"] == "Ocean again"
        assert body["similar_dreams"][0]["similarity_score"] == pytest.approx(0.93)
        assert embedding_svc.find_similar.await_args.kwargs["limit"] == 50


class TestGamificationRoutes:

    def test_add_xp(self, client, gamification_svc):
        gamification_svc.award_xp.return_value = LevelProgress(
            total_xp=120, level=2, next_level_xp=382, title="Dream Novice", level_up=True, levels_gained=1
        )

        response = client.post("/gamification/add-xp", json={"amount": 120, "reason": "Bonus"})

        assert response.status_code == 200
        assert response.json() == {"total_xp": 120, "new_level": 2, "level_up": True, "title": "Dream Novice"}

    def test_add_xp_rejects_bad_amount(self, client, gamification_svc):
        gamification_svc.award_xp.side_effect = ValidationError("amount must be a positive integer")

        response = client.post("/gamification/add-xp", json={"amount": 0, "reason": "Bonus"})

        assert response.status_code == 400

    def test_update_streak(self, client, gamification_svc):
        gamification_svc.update_streak.return_value = StreakUpdate(
            streak_type="mood", current_streak=3, longest_streak=5, is_new_record=False
        )

        response = client.post("/gamification/update-streak", json={"streak_type": "mood"})

        assert response.status_code == 200
        body = response.json()
        assert body["current_streak"] == 3
        assert body["milestone"] is False
        assert body["xp_awarded"] == 0

    def test_progress(self, client, gamification_svc):
        streak = SimpleNamespace(
            current_dream_streak=2, longest_dream_streak=4, last_dream_date=None,
            current_mood_streak=0, longest_mood_streak=0, last_mood_date=None,
            current_wellness_streak=2, longest_wellness_streak=4, last_wellness_date=None,
        )
        gamification_svc.get_progress.return_value = (starting_progress(), streak)

        response = client.get("/gamification/progress")

        assert response.status_code == 200
        body = response.json()
        assert body["level"]["current_level"] == 1
        assert body["level"]["next_level_xp"] == 100
        assert body["dream_streak"] == {"current": 2, "longest": 4, "last_date": None}

    def test_update_streak_reports_unlocked_achievements(self, client, gamification_svc):
        gamification_svc.update_streak.return_value = StreakUpdate(
            streak_type="dream", current_streak=7, longest_streak=7, is_new_record=True,
            achievements_unlocked=("week_streak",),
        )

        response = client.post("/gamification/update-streak", json={"streak_type": "dream"})

        assert response.status_code == 200
        assert response.json()["achievements_unlocked"] == ["week_streak"]

    def test_achievements(self, client, gamification_svc):
        def entry(code, category, unlocked):
            catalogue_row = SimpleNamespace(
                id=uuid4(), code=code, name=code.title(), description=code, icon=None,
                category=category, tier="bronze", xp_reward=10,
            )
            return AchievementStatus(
                achievement=catalogue_row,
                is_unlocked=unlocked,
                unlocked_at=datetime(2024, 3, 1, 8, 0) if unlocked else None,
                is_viewed=False,
                progress=100 if unlocked else 30,
            )

        gamification_svc.list_achievements.return_value = [
            entry("first_dream", "beginner", True),
            entry("journaler", "volume", False),
            entry("archivist", "volume", False),
        ]

        response = client.get("/gamification/achievements", params={"tier": "bronze"})

        assert response.status_code == 200
        body = response.json()
        assert (body["total"], body["unlocked"]) == (3, 1)
        assert [a["code"] for a in body["grouped"]["volume"]] == ["journaler", "archivist"]
        assert body["achievements"][1]["progress"] == 30
        assert gamification_svc.list_achievements.await_args.kwargs == {"category": None, "tier": "bronze"}

    def test_achievements_failure(self, client, gamification_svc):
        gamification_svc.list_achievements.side_effect = RuntimeError("db down")

        response = client.get("/gamification/achievements")

        assert response.status_code == 500
