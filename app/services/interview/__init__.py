"""
面试对话模块：会话状态、对话模式、提示词和本地预设回复
"""
from .session import InterviewSession, SessionState, SessionStateError, AssetStatus, UploadedAsset
from .store import MemorySessionStore, get_session_store
from .modes import get_next_question, is_interview_complete, MODEL_DECIDES
from .prompts import (
    generate_system_prompt,
    generate_scoring_prompt,
    generate_email_prompt,
    parse_json_reply,
    turn_instruction,
)
from .canned import canned_reply, test_mode_greeting, TEST_MODE_NOTICE

__all__ = [
    "InterviewSession",
    "SessionState",
    "SessionStateError",
    "AssetStatus",
    "UploadedAsset",
    "MemorySessionStore",
    "get_session_store",
    "get_next_question",
    "is_interview_complete",
    "MODEL_DECIDES",
    "generate_system_prompt",
    "generate_scoring_prompt",
    "generate_email_prompt",
    "parse_json_reply",
    "turn_instruction",
    "canned_reply",
    "test_mode_greeting",
    "TEST_MODE_NOTICE",
]
