"""
对话模式策略

决定下一个问题以及面试何时算作完成
"""
from typing import Optional, Sequence

from app.models.persona import ConversationMode


MODEL_DECIDES = "Let the model decide the next best question based on context."

# mixed 模式下先按顺序提问的数量，之后交给模型决定
MIXED_SEQUENCED_QUESTIONS = 2
MIXED_COMPLETION_RATIO = 0.7


def normalize_mode(mode: Optional[str]) -> str:
    """未知或空的模式按 structured 处理"""
    try:
        return ConversationMode(mode).value
    except ValueError:
        return ConversationMode.STRUCTURED.value


def get_next_question(
    mode: str,
    answers: Sequence[dict],
    question_sequence: Sequence[dict],
) -> Optional[str]:
    """
    获取下一个问题

    按顺序提问时返回问题文本，由模型决定时返回 MODEL_DECIDES，
    所有顺序问题都已回答时返回 None
    """
    answered = len(answers)
    if answered >= len(question_sequence):
        return None

    if mode == ConversationMode.CONVERSATIONAL.value:
        return MODEL_DECIDES

    if mode == ConversationMode.MIXED.value:
        if answered < min(MIXED_SEQUENCED_QUESTIONS, len(question_sequence)):
            return question_sequence[answered]["text"]
        return MODEL_DECIDES

    return question_sequence[answered]["text"]


def completion_threshold(mode: str, question_count: int, min_questions: int = 3) -> float:
    """面试完成所需的回答数量"""
    if mode == ConversationMode.CONVERSATIONAL.value:
        return float(min_questions)
    if mode == ConversationMode.MIXED.value:
        return max(float(min_questions), question_count * MIXED_COMPLETION_RATIO)
    return float(question_count)


def is_interview_complete(
    mode: str,
    answers: Sequence[dict],
    question_sequence: Sequence[dict],
    min_questions: int = 3,
) -> bool:
    return len(answers) >= completion_threshold(mode, len(question_sequence), min_questions)


def progress_percentage(
    mode: str,
    answered: int,
    question_count: int,
    min_questions: int = 3,
) -> int:
    """进度百分比 round(answered / total * 100)，上限 100"""
    total = completion_threshold(mode, question_count, min_questions)
    if total <= 0:
        return 0
    return min(100, round(answered / total * 100))

