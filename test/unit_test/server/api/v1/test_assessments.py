import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database.repositories import QuestionnaireRepository
from early_autism_detector.core.scoring import RISK_IF_YES

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/assessments"


@pytest_asyncio.fixture
async def seeded(session: AsyncSession):
    await QuestionnaireRepository(session).seed_defaults()


async def _start(client: AsyncClient) -> dict:
    child = (await client.post("/api/v1/children", json={"name": "Sam", "date_of_birth": "2023-01-15"})).json()
    response = await client.post(BASE, json={"child_id": child["id"]})
    assert response.status_code == 201
    return response.json()


async def _answer(client: AsyncClient, assessment_id: str, question_id: int, answer: str):
    return await client.put(f"{BASE}/{assessment_id}/responses", json={"question_id": question_id, "answer": answer})


async def _deactivate(session: AsyncSession, question_number: int) -> None:
    repository = QuestionnaireRepository(session)
    question = await repository.get_by_number(question_number)
    await repository.update(question, {"is_active": False})


class TestAssessmentWorkflow:
    async def test_start_for_unknown_child(self, client: AsyncClient):
        response = await client.post(BASE, json={"child_id": "missing"})
        assert response.status_code == 404

    async def test_start_is_in_progress(self, client: AsyncClient):
        assessment = await _start(client)
        assert assessment["status"] == "in_progress"
        assert assessment["score"] is None

    @pytest.mark.usefixtures("seeded")
    async def test_answers_are_replaced(self, client: AsyncClient):
        assessment = await _start(client)
        await _answer(client, assessment["id"], 1, "yes")
        response = await _answer(client, assessment["id"], 1, "no")
        assert response.status_code == 200
        assert response.json()["answer"] == "no"

        detail = (await client.get(f"{BASE}/{assessment['id']}")).json()
        assert detail["responses"] == [{"question_id": 1, "answer": "no", "notes": None}]
        assert detail["result"] is None

    @pytest.mark.usefixtures("seeded")
    async def test_unknown_question(self, client: AsyncClient):
        assessment = await _start(client)
        response = await _answer(client, assessment["id"], 99, "yes")
        assert response.status_code == 400

    @pytest.mark.usefixtures("seeded")
    async def test_inactive_question_is_rejected(self, client: AsyncClient, session: AsyncSession):
        assessment = await _start(client)
        await _deactivate(session, 1)

        response = await _answer(client, assessment["id"], 1, "no")

        assert response.status_code == 400
        detail = (await client.get(f"{BASE}/{assessment['id']}")).json()
        assert detail["responses"] == []

    @pytest.mark.usefixtures("seeded")
    async def test_complete_scores_and_stores_result(self, client: AsyncClient):
        assessment = await _start(client)
        for question_id in range(1, 21):
            typical = "no" if question_id in RISK_IF_YES else "yes"
            await _answer(client, assessment["id"], question_id, typical)
        # Three risk answers
        await _answer(client, assessment["id"], 1, "no")
        await _answer(client, assessment["id"], 2, "yes")
        await _answer(client, assessment["id"], 12, "yes")

        response = await client.post(f"{BASE}/{assessment['id']}/complete")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["score"] == 3
        assert body["risk_level"] == "Medium Risk"
        assert body["completed_at"] is not None
        assert body["result"]["max_score"] == 20
        assert body["result"]["percentage"] == 15.0
        assert body["result"]["interpretation"] == "Administer M-CHAT-R Follow-Up interview"

    @pytest.mark.usefixtures("seeded")
    async def test_completed_assessment_rejects_answers(self, client: AsyncClient):
        assessment = await _start(client)
        await client.post(f"{BASE}/{assessment['id']}/complete")

        response = await _answer(client, assessment["id"], 1, "yes")
        assert response.status_code == 409

    @pytest.mark.usefixtures("seeded")
    async def test_unanswered_assessment_is_low_risk(self, client: AsyncClient):
        assessment = await _start(client)
        body = (await client.post(f"{BASE}/{assessment['id']}/complete")).json()
        assert body["score"] == 0
        assert body["risk_level"] == "Low Risk"
        assert body["result"]["unanswered"] == 20

    async def test_other_parents_assessment_is_not_found(self, client: AsyncClient, app, parent_user):
        from early_autism_detector.integrations.supabase_auth import SupabaseUser
        from early_autism_detector.server.services.auth import get_current_user

        assessment = await _start(client)

        async def other_parent():
            return SupabaseUser(id="someone-else", email="other@example.com")

        app.dependency_overrides[get_current_user] = other_parent
        assert (await client.get(f"{BASE}/{assessment['id']}")).status_code == 404
        assert (await client.post(f"{BASE}/{assessment['id']}/complete")).status_code == 404

    @pytest.mark.usefixtures("seeded")
    async def test_result_is_kept_after_questionnaire_changes(self, client: AsyncClient, session: AsyncSession):
        assessment = await _start(client)
        for question_id in (1, 3, 4):
            await _answer(client, assessment["id"], question_id, "no")
        completed = (await client.post(f"{BASE}/{assessment['id']}/complete")).json()
        assert completed["score"] == 3

        await _deactivate(session, 1)
        body = (await client.get(f"{BASE}/{assessment['id']}")).json()

        assert body["score"] == 3
        assert body["risk_level"] == "Medium Risk"
        assert body["result"]["score"] == 3
        assert body["result"]["risk_category"] == "Medium Risk"
        assert body["result"]["answered"] == 3
        assert body["result"] == completed["result"]
