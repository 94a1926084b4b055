import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database.entities.questionnaire import ScoringRangeRecord
from early_autism_detector.core.database.repositories import QuestionnaireRepository

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/questionnaire"


async def test_questions_empty_before_seeding(anon_client: AsyncClient):
    response = await anon_client.get(f"{BASE}/questions")
    assert response.status_code == 200
    assert response.json() == []


async def test_seeded_questions_in_order(anon_client: AsyncClient, session: AsyncSession):
    await QuestionnaireRepository(session).seed_defaults()

    questions = (await anon_client.get(f"{BASE}/questions")).json()

    assert [q["question_number"] for q in questions] == list(range(1, 21))
    assert questions[1]["risk_answer"] == "yes"
    assert questions[0]["risk_answer"] == "no"


async def test_scoring_ranges_default(anon_client: AsyncClient):
    ranges = (await anon_client.get(f"{BASE}/scoring-ranges")).json()
    assert [r["risk_category"] for r in ranges] == ["Low Risk", "Medium Risk", "High Risk"]


async def test_score_uses_configured_ranges(anon_client: AsyncClient, session: AsyncSession):
    session.add(
        ScoringRangeRecord(
            min_score=0, max_score=20, percentage_range="n/a", risk_category="Any", interpretation="Single range"
        )
    )
    await session.commit()

    response = await anon_client.post(
        f"{BASE}/score",
        json={"questions": [{"id": 1}, {"id": 2}], "answers": [{"question_id": 1, "answer": "no"}]},
    )

    assert response.status_code == 200
    assert response.json()["risk_category"] == "Any"


async def test_score_example(anon_client: AsyncClient):
    response = await anon_client.post(
        f"{BASE}/score",
        json={
            "questions": [{"id": 1}, {"id": 2}, {"id": 5}, {"id": 12}],
            "answers": [
                {"question_id": 1, "answer": "no"},
                {"question_id": 2, "answer": "yes"},
                {"question_id": 5, "answer": "no"},
                {"question_id": 12, "answer": "yes"},
            ],
        },
    )

    body = response.json()
    assert body["score"] == 3
    assert body["max_score"] == 4
    assert body["risk_category"] == "Medium Risk"


async def test_score_rejects_invalid_answer(anon_client: AsyncClient):
    response = await anon_client.post(
        f"{BASE}/score", json={"questions": [{"id": 1}], "answers": [{"question_id": 1, "answer": "maybe"}]}
    )
    assert response.status_code == 400
