"""
InterviewSession state machine tests
"""
import pytest

from app.services.interview import (
    AssetStatus,
    InterviewSession,
    SessionState,
    SessionStateError,
    TEST_MODE_NOTICE,
)

ROLE = {"id": "role-1", "title": "Associate Engineer", "tags": ["BMS"]}
COMPANY = {"id": "co-1", "name": "SmartJoules"}


def _persona(n: int = 3, mode: str = "structured") -> dict:
    return {
        "persona_name": "Rajesh Kumar",
        "conversation_mode": mode,
        "question_sequence": [{"id": f"eq{i}", "text": f"Question {i}?"} for i in range(1, n + 1)],
    }


def _ready(persona: dict = None) -> InterviewSession:
    session = InterviewSession()
    session.load(ROLE, COMPANY, persona or _persona())
    session.finish_turn("Hello, Question 1?")
    return session


def test_load_sets_first_question():
    session = InterviewSession()
    assert session.state == SessionState.LOADING_ROLE_DATA

    session.load(ROLE, COMPANY, _persona())
    assert session.state == SessionState.GREETING
    assert session.role_id == "role-1"
    assert session.current_question == "Question 1?"
    assert session.progress_percentage == 0


def test_persona_without_questions_is_conversational():
    session = InterviewSession()
    session.load(ROLE, COMPANY, _persona(0, mode="structured"))
    assert session.mode == "conversational"
    assert session.current_question is None


def test_turns_record_answers_and_progress():
    session = _ready()

    session.begin_turn("My first answer")
    assert session.state == SessionState.AWAITING_MODEL_REPLY
    assert session.answers == [{"q": "Question 1?", "a": "My first answer"}]
    assert session.question_index == 1
    assert session.progress_percentage == 33
    assert session.current_question == "Question 2?"

    session.finish_turn("Thanks. Question 2?")
    assert session.state == SessionState.AWAITING_USER_INPUT


def test_completes_after_last_answer():
    session = _ready()
    for i in range(3):
        session.begin_turn(f"answer {i}")
        session.finish_turn("ok")

    assert session.state == SessionState.COMPLETE
    assert session.interview_complete is True
    assert session.progress_percentage == 100
    with pytest.raises(SessionStateError):
        session.begin_turn("one more")


def test_cannot_send_while_reply_pending():
    session = _ready()
    session.begin_turn("first")
    with pytest.raises(SessionStateError):
        session.begin_turn("second")

    session.abort_turn()
    assert session.state == SessionState.AWAITING_USER_INPUT


def test_conversational_answers_use_last_assistant_question():
    session = _ready(_persona(0))
    session.begin_turn("I led a team of ten")
    assert session.answers[0]["q"] == "Hello, Question 1?"


def test_status_messages_stay_out_of_history():
    session = InterviewSession()
    session.load(ROLE, COMPANY, _persona())
    session.add_assistant_message("Loading...", kind="status")
    session.finish_turn("Hi there")
    assert session.history() == [{"role": "assistant", "content": "Hi there"}]
    assert len(session.messages) == 2


def test_failure_counting():
    session = _ready()
    session.register_failure()
    session.register_failure()
    assert session.has_api_error
    assert not session.retries_exhausted(2)
    session.register_failure()
    assert session.retries_exhausted(2)

    session.register_success()
    assert session.retry_count == 0
    assert not session.has_api_error


def test_test_mode_is_sticky():
    session = _ready()
    session.enable_test_mode("model unavailable")
    session.register_success()
    assert session.test_mode is True
    assert session.error == TEST_MODE_NOTICE


def test_test_mode_turns_record_no_answers():
    session = _ready(_persona(n=1))
    session.enable_test_mode("model unavailable")

    session.begin_turn("What is the salary?")
    assert session.answers == []
    assert session.current_question == "Question 1?"
    assert session.progress_percentage == 0

    session.finish_turn("Competitive.")
    assert session.state == SessionState.AWAITING_USER_INPUT
    assert [m.role for m in session.messages[-2:]] == ["user", "assistant"]


def test_assets():
    session = _ready()
    asset = session.add_asset("cv.pdf", 1200)
    assert asset.id.startswith("file-")
    assert asset.status == AssetStatus.UPLOADING

    session.update_asset(asset.id, status=AssetStatus.SUCCESS, url="https://files.test/cv.pdf", progress=100)
    assert session.asset_urls("resume") == ["https://files.test/cv.pdf"]
    assert session.asset_urls("portfolio") == []

    assert session.remove_asset(asset.id) is True
    assert session.remove_asset(asset.id) is False
    with pytest.raises(KeyError):
        session.update_asset(asset.id, progress=50)


def test_reset_keeps_role_and_clears_progress():
    session = _ready()
    old_id = session.session_id
    session.begin_turn("answer")
    session.finish_turn("next")
    session.enable_test_mode()

    session.reset()
    assert session.session_id != old_id
    assert session.state == SessionState.GREETING
    assert session.answers == []
    assert session.messages == []
    assert session.test_mode is False
    assert session.role_id == "role-1"
    assert session.current_question == "Question 1?"


def test_snapshot_is_json_ready():
    session = _ready()
    snap = session.snapshot()
    assert snap["state"] == "awaiting_user_input"
    assert snap["role"] == {"id": "role-1", "title": "Associate Engineer", "tags": ["BMS"]}
    assert snap["persona"]["persona_name"] == "Rajesh Kumar"
    assert snap["total_questions"] == 3
    assert isinstance(snap["created_at"], str)
