"""
面试会话状态

每个聊天对应一个对象。状态转换都是普通的同步方法，异步操作（模型调用、
存储、持久化）由聊天服务完成

状态流转:
    loading_role_data -> greeting -> awaiting_user_input
        -> awaiting_model_reply -> awaiting_user_input | complete

test_mode 是独立的标志，一旦设置，直到 reset() 前都不会恢复
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.models.base import utcnow
from .canned import TEST_MODE_NOTICE
from .modes import (
    MODEL_DECIDES,
    get_next_question,
    is_interview_complete,
    normalize_mode,
    progress_percentage,
)


class SessionStateError(Exception):
    """当前状态下不允许该转换"""


class SessionState(str, Enum):
    LOADING_ROLE_DATA = "loading_role_data"
    GREETING = "greeting"
    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_MODEL_REPLY = "awaiting_model_reply"
    COMPLETE = "complete"


class AssetStatus(str, Enum):
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: str
    content: str
    # "status" 消息只展示给用户，不发送给模型
    kind: str = "chat"
    timestamp: datetime = Field(default_factory=utcnow)


class UploadedAsset(BaseModel):
    id: str = Field(default_factory=lambda: f"file-{uuid.uuid4().hex[:12]}")
    type: str = "resume"
    name: str
    size: int = 0
    url: Optional[str] = None
    status: AssetStatus = AssetStatus.UPLOADING
    progress: int = 0
    error: Optional[str] = None


def _new_session_id() -> str:
    return uuid.uuid4().hex


class InterviewSession(BaseModel):
    """单个候选人在单个职位下的服务端聊天状态"""

    session_id: str = Field(default_factory=_new_session_id)
    state: SessionState = SessionState.LOADING_ROLE_DATA

    role_id: Optional[str] = None
    role: Dict[str, Any] = Field(default_factory=dict)
    company: Dict[str, Any] = Field(default_factory=dict)
    persona: Dict[str, Any] = Field(default_factory=dict)
    mode: str = "structured"
    min_questions: int = 3

    messages: List[ChatMessage] = Field(default_factory=list)
    questions: List[Dict[str, Any]] = Field(default_factory=list)
    answers: List[Dict[str, str]] = Field(default_factory=list)
    current_question: Optional[str] = None
    question_index: int = 0
    progress_percentage: int = 0
    interview_complete: bool = False

    uploaded_assets: List[UploadedAsset] = Field(default_factory=list)

    fit_score: Optional[float] = None
    summary_candidate: Optional[str] = None
    summary_recruiter: Optional[str] = None
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    candidate_id: Optional[str] = None

    test_mode: bool = False
    test_mode_reason: Optional[str] = None
    has_api_error: bool = False
    error: Optional[str] = None
    retry_count: int = 0

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # ==================== 加载 ====================

    def load(
        self,
        role: Dict[str, Any],
        company: Dict[str, Any],
        persona: Dict[str, Any],
        min_questions: int = 3,
    ) -> None:
        """载入职位、公司和人设，然后等待开场白"""
        self.role_id = role.get("id")
        self.role = role
        self.company = company or {}
        self.persona = persona
        self.min_questions = min_questions
        self.questions = list(persona.get("question_sequence") or [])

        mode = persona.get("conversation_mode") or role.get("conversation_mode")
        self.mode = normalize_mode(mode) if self.questions else "conversational"

        self._refresh_progress()
        self.state = SessionState.GREETING
        self._touch()

    # ==================== 消息 ====================

    def add_assistant_message(self, text: str, kind: str = "chat") -> ChatMessage:
        message = ChatMessage(role="assistant", content=text, kind=kind)
        self.messages.append(message)
        self._touch()
        return message

    def add_user_message(self, text: str) -> ChatMessage:
        message = ChatMessage(role="user", content=text)
        self.messages.append(message)
        self._touch()
        return message

    def history(self) -> List[Dict[str, str]]:
        """转换为 chat-completions 格式的消息列表（不含 status 消息）"""
        return [
            {"role": m.role, "content": m.content}
            for m in self.messages
            if m.kind == "chat"
        ]

    def _last_assistant_text(self) -> Optional[str]:
        for message in reversed(self.messages):
            if message.role == "assistant" and message.kind == "chat":
                return message.content
        return None

    # ==================== 对话轮次 ====================

    def begin_turn(self, text: str) -> None:
        """
        接收一条用户消息

        消息记录为当前问题的回答（由模型决定问题时，对应助手最后一次的提问）。
        测试模式下不会有人提出这些问题，因此不记录回答，进度保持不变

        Raises:
            SessionStateError: 正在等待回复或面试已结束
        """
        if self.state != SessionState.AWAITING_USER_INPUT:
            raise SessionStateError(f"Cannot accept a message while {self.state.value}")

        self.add_user_message(text)
        if self.test_mode:
            self.state = SessionState.AWAITING_MODEL_REPLY
            self._touch()
            return

        question = self.current_question or self._last_assistant_text() or ""
        self.answers.append({"q": question, "a": text})
        self.question_index += 1
        self._refresh_progress()
        self.state = SessionState.AWAITING_MODEL_REPLY
        self._touch()

    def finish_turn(self, reply: str) -> None:
        """写入开场白或用户轮次的助手回复"""
        if self.state not in (SessionState.GREETING, SessionState.AWAITING_MODEL_REPLY):
            raise SessionStateError(f"No reply expected while {self.state.value}")

        self.add_assistant_message(reply)
        if (
            self.state == SessionState.AWAITING_MODEL_REPLY
            and not self.test_mode
            and self.is_complete()
        ):
            self.interview_complete = True
            self.state = SessionState.COMPLETE
        else:
            self.state = SessionState.AWAITING_USER_INPUT
        self._touch()

    def abort_turn(self) -> None:
        """意外失败后把轮次交还给用户"""
        if self.state == SessionState.AWAITING_MODEL_REPLY:
            self.state = SessionState.AWAITING_USER_INPUT
            self._touch()

    def is_complete(self) -> bool:
        return is_interview_complete(self.mode, self.answers, self.questions, self.min_questions)

    def next_question(self) -> Optional[str]:
        """按对话模式获取下一个问题，问题序列用完时返回 None"""
        return get_next_question(self.mode, self.answers, self.questions)

    def _refresh_progress(self) -> None:
        nxt = self.next_question()
        self.current_question = None if nxt == MODEL_DECIDES else nxt
        self.progress_percentage = progress_percentage(
            self.mode, len(self.answers), len(self.questions), self.min_questions
        )

    # ==================== 失败处理 ====================

    def register_failure(self) -> None:
        self.retry_count += 1
        self.has_api_error = True
        self._touch()

    def register_success(self) -> None:
        self.retry_count = 0
        self.has_api_error = False
        self._touch()

    def retries_exhausted(self, max_retries: int) -> bool:
        """首次请求和 max_retries 次重试都失败后返回 True"""
        return self.retry_count > max_retries

    def enable_test_mode(self, reason: Optional[str] = None) -> None:
        """之后的所有轮次都使用本地预设回复"""
        self.test_mode = True
        self.test_mode_reason = reason
        self.error = TEST_MODE_NOTICE
        self._touch()

    # ==================== 上传文件 ====================

    def add_asset(self, name: str, size: int, asset_type: str = "resume") -> UploadedAsset:
        asset = UploadedAsset(name=name, size=size, type=asset_type)
        self.uploaded_assets.append(asset)
        self._touch()
        return asset

    def get_asset(self, asset_id: str) -> Optional[UploadedAsset]:
        for asset in self.uploaded_assets:
            if asset.id == asset_id:
                return asset
        return None

    def update_asset(self, asset_id: str, **updates: Any) -> UploadedAsset:
        asset = self.get_asset(asset_id)
        if asset is None:
            raise KeyError(asset_id)
        for field, value in updates.items():
            setattr(asset, field, value)
        self._touch()
        return asset

    def remove_asset(self, asset_id: str) -> bool:
        before = len(self.uploaded_assets)
        self.uploaded_assets = [a for a in self.uploaded_assets if a.id != asset_id]
        self._touch()
        return len(self.uploaded_assets) < before

    def asset_urls(self, asset_type: str) -> List[str]:
        return [
            a.url for a in self.uploaded_assets
            if a.type == asset_type and a.status == AssetStatus.SUCCESS and a.url
        ]

    # ==================== 评估 ====================

    def set_candidate_info(self, name: Optional[str], email: Optional[str]) -> None:
        self.candidate_name = name
        self.candidate_email = email
        self._touch()

    def set_evaluation(
        self,
        fit_score: Optional[float],
        summary_candidate: Optional[str],
        summary_recruiter: Optional[str],
    ) -> None:
        self.fit_score = fit_score
        self.summary_candidate = summary_candidate
        self.summary_recruiter = summary_recruiter
        self._touch()

    # ==================== 重置 / 视图 ====================

    def reset(self) -> None:
        """生成新的会话 ID，保留职位、公司、人设和问题，其余全部清空"""
        fresh = InterviewSession(
            role_id=self.role_id,
            role=self.role,
            company=self.company,
            persona=self.persona,
            mode=self.mode,
            min_questions=self.min_questions,
            questions=self.questions,
        )
        for field in InterviewSession.model_fields:
            setattr(self, field, getattr(fresh, field))
        self._refresh_progress()
        self.state = SessionState.GREETING

    def snapshot(self) -> Dict[str, Any]:
        """API 响应用的可 JSON 序列化视图"""
        data = self.model_dump(mode="json", exclude={"role", "company", "persona"})
        data["role"] = {
            "id": self.role.get("id"),
            "title": self.role.get("title"),
            "tags": self.role.get("tags") or [],
        }
        data["company"] = {"id": self.company.get("id"), "name": self.company.get("name")}
        data["persona"] = {
            "persona_name": self.persona.get("persona_name"),
            "avatar_url": self.persona.get("avatar_url"),
            "bio": self.persona.get("bio"),
        }
        data["total_questions"] = len(self.questions)
        return data

    def _touch(self) -> None:
        self.updated_at = utcnow()
