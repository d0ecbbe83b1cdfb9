"""
InterviewChatService tests

Model calls go to FakeLLM, uploads to FakeStorage; database rows are
created in one session and read by the service in another, as between
two requests.
"""
import json

import pytest

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    UpstreamException,
)
from app.crud import candidate_crud, company_crud, persona_crud, role_crud
from app.services.chat_service import DEFAULT_PERSONA, NEUTRAL_EVALUATION, InterviewChatService
from app.services.interview import MemorySessionStore, SessionState
from app.services.interview import canned
from tests.conftest import FakeLLM, FakeStorage, PDF_BYTES


async def _make_role(session_factory, questions: int = 3, with_persona: bool = True) -> str:
    async with session_factory() as db:
        company = await company_crud.create(db, obj_in={"name": "SmartJoules"})
        role = await role_crud.create(
            db,
            obj_in={
                "company_id": company.id,
                "title": "Associate Engineer",
                "tags": ["BMS", "HVAC"],
            },
        )
        if with_persona:
            await persona_crud.create(
                db,
                obj_in={
                    "role_id": role.id,
                    "persona_name": "Rajesh Kumar",
                    "conversation_mode": "structured",
                    "question_sequence": [
                        {"id": f"eq{i}", "text": f"Question {i}?", "type": "open"}
                        for i in range(1, questions + 1)
                    ],
                    "end_message": "Our technical team will reach out.",
                    "fallback_message": "Please email careers@smartjoules.in",
                },
            )
        await db.commit()
        return role.id


@pytest.fixture
def service(fake_llm: FakeLLM, session_store: MemorySessionStore, fake_storage: FakeStorage):
    return InterviewChatService(fake_llm, session_store, fake_storage)


async def _start(service, session_factory, **kwargs):
    role_id = await _make_role(session_factory, **kwargs)
    async with session_factory() as db:
        return await service.start(db, role_id)


# ==================== start ====================

@pytest.mark.asyncio
async def test_start_greets_with_model_reply(service, session_factory, fake_llm):
    fake_llm.replies = ["Hi, I'm Rajesh. Question 1?"]
    session = await _start(service, session_factory)

    assert session.state == SessionState.AWAITING_USER_INPUT
    assert [m.kind for m in session.messages] == ["status", "chat"]
    assert session.messages[-1].content == "Hi, I'm Rajesh. Question 1?"
    assert session.test_mode is False

    sent = fake_llm.calls[0]
    assert sent[0]["role"] == "system"
    assert "Rajesh Kumar" in sent[0]["content"]
    assert 'ask: "Question 1?"' in sent[-1]["content"]
    # the loading notice never reaches the model
    assert all("loading information" not in m["content"] for m in sent)


@pytest.mark.asyncio
async def test_start_unknown_role(service, session_factory):
    async with session_factory() as db:
        with pytest.raises(NotFoundException):
            await service.start(db, "missing")


@pytest.mark.asyncio
async def test_default_persona_when_none_attached(service, session_factory):
    session = await _start(service, session_factory, with_persona=False)
    assert session.persona["persona_name"] == DEFAULT_PERSONA["persona_name"]
    assert session.mode == "conversational"


# ==================== turns ====================

@pytest.mark.asyncio
async def test_structured_interview_runs_to_completion(service, session_factory, fake_llm):
    session = await _start(service, session_factory, questions=3)

    session, reply = await service.send(session.session_id, "I installed Honeywell controllers")
    assert session.progress_percentage == 33
    assert '"Question 2?"' in fake_llm.calls[-1][-1]["content"]

    await service.send(session.session_id, "HVAC ties into the BMS over BACnet")
    session, reply = await service.send(session.session_id, "I check the bus wiring first")

    assert session.state == SessionState.COMPLETE
    assert session.progress_percentage == 100
    assert reply == "Our technical team will reach out."
    # greeting plus two turns; the closing message needs no model call
    assert len(fake_llm.calls) == 3
    assert [a["q"] for a in session.answers] == ["Question 1?", "Question 2?", "Question 3?"]

    with pytest.raises(ConflictException):
        await service.send(session.session_id, "hello?")


@pytest.mark.asyncio
async def test_empty_message_rejected(service, session_factory):
    session = await _start(service, session_factory)
    with pytest.raises(BadRequestException):
        await service.send(session.session_id, "   ")


@pytest.mark.asyncio
async def test_unknown_session(service):
    with pytest.raises(NotFoundException):
        await service.send("nope", "hello")


# ==================== failures ====================

@pytest.mark.asyncio
async def test_retries_then_recovers(service, session_factory, fake_llm):
    session = await _start(service, session_factory)
    fake_llm.fail_times = 2

    session, reply = await service.send(session.session_id, "first answer")
    assert reply.startswith("Reply")
    assert session.test_mode is False
    assert session.retry_count == 0
    # greeting + two failures + the successful retry
    assert len(fake_llm.calls) == 4


@pytest.mark.asyncio
async def test_three_failures_switch_to_test_mode_for_good(service, session_factory, fake_llm):
    session = await _start(service, session_factory)
    fake_llm.always_fail = True

    session, reply = await service.send(session.session_id, "What is the salary?")
    assert session.test_mode is True
    assert session.error == canned.TEST_MODE_NOTICE
    assert reply == canned.TEST_RESPONSES["salary"]
    calls_after_switch = len(fake_llm.calls)
    assert calls_after_switch == 1 + 3

    # the model is back, but the session stays on local replies
    fake_llm.always_fail = False
    session, reply = await service.send(session.session_id, "Tell me about the interview process")
    assert reply == canned.TEST_RESPONSES["interview"]
    assert len(fake_llm.calls) == calls_after_switch


@pytest.mark.asyncio
async def test_test_mode_turns_leave_the_interview_alone(service, session_factory, fake_llm):
    session = await _start(service, session_factory)
    session, _ = await service.send(session.session_id, "Ten years of BMS work")
    fake_llm.always_fail = True

    session, reply = await service.send(session.session_id, "What is the salary?")
    assert session.test_mode is True
    assert reply == canned.TEST_RESPONSES["salary"]

    session, reply = await service.send(session.session_id, "What's the hiring process?")
    assert reply == canned.TEST_RESPONSES["interview"]

    session, reply = await service.send(session.session_id, "What skills do I need?")
    assert reply == canned.TEST_RESPONSES["requirements"]

    assert session.answers == [{"q": "Question 1?", "a": "Ten years of BMS work"}]
    assert session.question_index == 1
    assert session.current_question == "Question 2?"
    assert session.progress_percentage == 33
    assert session.state == SessionState.AWAITING_USER_INPUT
    assert session.interview_complete is False


@pytest.mark.asyncio
async def test_failed_greeting_uses_local_greeting(service, session_factory, fake_llm):
    fake_llm.always_fail = True
    session = await _start(service, session_factory)

    assert session.test_mode is True
    assert session.messages[-1].content == canned.test_mode_greeting("Associate Engineer")
    assert session.state == SessionState.AWAITING_USER_INPUT


@pytest.mark.asyncio
async def test_unconfigured_model_goes_straight_to_test_mode(service, session_factory, fake_llm):
    fake_llm.configured = False
    session = await _start(service, session_factory)
    assert session.test_mode is True
    assert fake_llm.calls == []

    session, reply = await service.send(session.session_id, "How do I apply?")
    assert reply == canned.TEST_RESPONSES["application"]


# ==================== assets ====================

@pytest.mark.asyncio
async def test_attach_resume_feeds_the_chat(service, session_factory, fake_storage):
    session = await _start(service, session_factory)

    session, asset, reply = await service.attach_asset(
        session.session_id, "cv.pdf", "application/pdf", PDF_BYTES
    )
    assert asset.status == "success"
    assert asset.url.startswith("https://files.test/resumes/")
    assert fake_storage.uploads[0]["bucket"] == "resumes"
    assert reply is not None
    assert session.answers[0]["a"] == "I've uploaded my resume: cv.pdf"


@pytest.mark.asyncio
async def test_attach_rejected_type(service, session_factory, session_store, fake_storage):
    session = await _start(service, session_factory)

    with pytest.raises(BadRequestException) as exc_info:
        await service.attach_asset(session.session_id, "song.mp3", "audio/mpeg", b"ID3")
    assert exc_info.value.data["asset"]["status"] == "error"
    assert fake_storage.uploads == []

    stored = await session_store.get(session.session_id)
    assert stored.uploaded_assets[0].status == "error"
    assert stored.answers == []


@pytest.mark.asyncio
async def test_attach_storage_failure(service, session_factory, fake_storage):
    session = await _start(service, session_factory)
    fake_storage.fail = True
    with pytest.raises(UpstreamException):
        await service.attach_asset(session.session_id, "cv.pdf", "application/pdf", PDF_BYTES)


@pytest.mark.asyncio
async def test_remove_asset(service, session_factory):
    session = await _start(service, session_factory)
    session, asset, _ = await service.attach_asset(
        session.session_id, "cv.pdf", "application/pdf", PDF_BYTES
    )
    session = await service.remove_asset(session.session_id, asset.id)
    assert session.uploaded_assets == []
    with pytest.raises(NotFoundException):
        await service.remove_asset(session.session_id, asset.id)


# ==================== evaluation ====================

@pytest.mark.asyncio
async def test_complete_scores_and_stores_candidate(service, session_factory, fake_llm):
    session = await _start(service, session_factory, questions=1)
    await service.send(session.session_id, "Ten years of BMS work")

    fake_llm.replies = [json.dumps({
        "fit_score": 85,
        "summary_candidate": "Great chat!",
        "summary_recruiter": "Strong field experience.",
    })]
    async with session_factory() as db:
        session, candidate = await service.complete(
            db, session.session_id, name="Priya", email="priya@example.com"
        )
        await db.commit()

    assert session.fit_score == 0.85
    assert candidate.fit_score == 0.85
    assert candidate.summary_recruiter == "Strong field experience."
    assert session.candidate_id == candidate.id

    async with session_factory() as db:
        stored = await candidate_crud.get_by_role(db, session.role_id)
    assert len(stored) == 1
    assert stored[0].answers == [{"q": "Question 1?", "a": "Ten years of BMS work"}]


@pytest.mark.asyncio
async def test_complete_in_test_mode_is_neutral(service, session_factory, fake_llm):
    session = await _start(service, session_factory)
    await service.send(session.session_id, "answer")
    fake_llm.always_fail = True
    session, _ = await service.send(session.session_id, "Is the role remote?")
    assert session.test_mode is True

    async with session_factory() as db:
        session, candidate = await service.complete(db, session.session_id)
    assert candidate.fit_score == NEUTRAL_EVALUATION["fit_score"]


@pytest.mark.asyncio
async def test_unparseable_score_is_neutral(service, session_factory, fake_llm):
    session = await _start(service, session_factory)
    await service.send(session.session_id, "answer")

    fake_llm.replies = ["I think they are great."]
    async with session_factory() as db:
        session, _ = await service.complete(db, session.session_id)
    assert session.fit_score == NEUTRAL_EVALUATION["fit_score"]


@pytest.mark.asyncio
async def test_complete_without_answers(service, session_factory):
    session = await _start(service, session_factory)
    async with session_factory() as db:
        with pytest.raises(BadRequestException):
            await service.complete(db, session.session_id)


@pytest.mark.asyncio
async def test_followup_email(service, session_factory, fake_llm):
    session = await _start(service, session_factory, questions=1)
    with pytest.raises(BadRequestException):
        await service.draft_followup_email(session.session_id)

    await service.send(session.session_id, "answer")
    fake_llm.replies = ['{"fit_score": 0.6}', "Dear Priya, thank you..."]
    async with session_factory() as db:
        await service.complete(db, session.session_id, name="Priya")

    result = await service.draft_followup_email(session.session_id)
    assert result == {"email": "Dear Priya, thank you...", "generated": True}
    assert "Draft a personalized follow-up email to Priya" in fake_llm.calls[-1][-1]["content"]


@pytest.mark.asyncio
async def test_followup_email_falls_back_to_end_message(service, session_factory, fake_llm):
    session = await _start(service, session_factory, questions=1)
    await service.send(session.session_id, "answer")
    async with session_factory() as db:
        await service.complete(db, session.session_id)

    fake_llm.always_fail = True
    result = await service.draft_followup_email(session.session_id)
    assert result == {"email": "Our technical team will reach out.", "generated": False}


# ==================== restart / stateless ====================

@pytest.mark.asyncio
async def test_restart(service, session_factory, session_store):
    session = await _start(service, session_factory)
    old_id = session.session_id
    await service.send(old_id, "answer")

    session = await service.restart(old_id)
    assert session.session_id != old_id
    assert session.answers == []
    assert session.state == SessionState.AWAITING_USER_INPUT
    assert await session_store.get(old_id) is None


@pytest.mark.asyncio
async def test_reply_once(service, session_factory, fake_llm):
    role_id = await _make_role(session_factory)
    fake_llm.replies = ["Hello from Rajesh"]
    async with session_factory() as db:
        result = await service.reply_once(db, role_id, message="Hi")
    assert result == {"message": "Hello from Rajesh", "is_error": False, "used_fallback_model": False}

    fake_llm.always_fail = True
    async with session_factory() as db:
        result = await service.reply_once(db, role_id, message="Hi")
    assert result["is_error"] is True
    assert result["message"] == "Please email careers@smartjoules.in"


@pytest.mark.asyncio
async def test_reply_once_needs_a_message(service, session_factory):
    role_id = await _make_role(session_factory)
    async with session_factory() as db:
        with pytest.raises(BadRequestException):
            await service.reply_once(db, role_id, message="")
