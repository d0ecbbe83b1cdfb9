"""
Conversation mode policy tests
"""
from app.services.interview.modes import (
    MODEL_DECIDES,
    get_next_question,
    is_interview_complete,
    normalize_mode,
    progress_percentage,
)

QUESTIONS = [{"id": f"q{i}", "text": f"Q{i}"} for i in range(1, 6)]


def _answers(n: int) -> list:
    return [{"q": f"Q{i}", "a": "yes"} for i in range(n)]


def test_structured_walks_the_sequence():
    assert get_next_question("structured", [], QUESTIONS) == "Q1"
    assert get_next_question("structured", _answers(4), QUESTIONS) == "Q5"
    assert get_next_question("structured", _answers(5), QUESTIONS) is None


def test_conversational_lets_the_model_pick():
    assert get_next_question("conversational", _answers(1), QUESTIONS) == MODEL_DECIDES


def test_mixed_asks_two_sequenced_questions_first():
    assert get_next_question("mixed", [], QUESTIONS) == "Q1"
    assert get_next_question("mixed", _answers(1), QUESTIONS) == "Q2"
    assert get_next_question("mixed", _answers(2), QUESTIONS) == MODEL_DECIDES


def test_completion_per_mode():
    assert not is_interview_complete("structured", _answers(4), QUESTIONS)
    assert is_interview_complete("structured", _answers(5), QUESTIONS)

    assert not is_interview_complete("conversational", _answers(2), QUESTIONS)
    assert is_interview_complete("conversational", _answers(3), QUESTIONS)

    # max(3, 0.7 * 5) = 3.5
    assert not is_interview_complete("mixed", _answers(3), QUESTIONS)
    assert is_interview_complete("mixed", _answers(4), QUESTIONS)


def test_progress_is_capped():
    assert progress_percentage("structured", 0, 5) == 0
    assert progress_percentage("structured", 2, 5) == 40
    assert progress_percentage("structured", 7, 5) == 100
    assert progress_percentage("conversational", 1, 0) == 33
    assert progress_percentage("structured", 3, 0) == 0


def test_unknown_mode_is_structured():
    assert normalize_mode("freestyle") == "structured"
    assert normalize_mode(None) == "structured"
    assert normalize_mode("mixed") == "mixed"
