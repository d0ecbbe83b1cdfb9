"""
面试官人设模型

职位关联的 AI 面试官：语气、系统提示词以及按顺序提出的问题
"""
from typing import Optional, List
from enum import Enum
from pydantic import field_validator
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class ConversationMode(str, Enum):
    """对话模式（决定问题推进方式）"""
    STRUCTURED = "structured"
    CONVERSATIONAL = "conversational"
    MIXED = "mixed"


class QuestionType(str, Enum):
    OPEN = "open"
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    SITUATIONAL = "situational"


class QuestionItem(SQLModelBase):
    """问题序列中的一项"""
    id: str = Field(..., min_length=1, description="Question ID, e.g. q1")
    text: str = Field(..., min_length=1, description="Question text")
    type: str = Field(QuestionType.OPEN.value, description="Question category")


# ==================== 基础字段 ====================

class PersonaBase(SQLModelBase):
    """人设基础字段"""
    persona_name: str = Field(..., min_length=1, max_length=100, description="Display name")
    bio: Optional[str] = Field(None, description="Short introduction")
    tone: Optional[str] = Field(None, max_length=200, description="Tone of voice")
    conversation_mode: str = Field(ConversationMode.STRUCTURED.value, max_length=20, description="Conversation mode")
    system_prompt: Optional[str] = Field(None, description="Custom system prompt")
    question_sequence: List[dict] = Field(default_factory=list, sa_column=Column(JSON), description="Ordered questions")
    scoring_prompt: Optional[str] = Field(None, description="Scoring prompt template")
    email_prompt: Optional[str] = Field(None, description="Follow-up email prompt template")
    fallback_message: Optional[str] = Field(None, description="Shown when the model cannot answer")
    end_message: Optional[str] = Field(None, description="Shown after the last question")
    avatar_url: Optional[str] = Field(None, max_length=500, description="Avatar image URL")


# ==================== 表模型 ====================

class Persona(PersonaBase, TimestampMixin, IDMixin, table=True):
    """人设表（每个职位一行）"""
    __tablename__ = "personas"

    role_id: str = Field(foreign_key="roles.id", unique=True, index=True, description="Role ID")

    def __repr__(self) -> str:
        return f"<Persona(id={self.id}, name={self.persona_name})>"


# ==================== 请求 Schema ====================

class PersonaCreate(PersonaBase):
    """创建人设"""
    role_id: str = Field(..., description="Role ID")
    question_sequence: List[QuestionItem] = Field(default_factory=list)

    @field_validator("conversation_mode")
    @classmethod
    def check_mode(cls, v: str) -> str:
        return ConversationMode(v).value


class PersonaUpdate(SQLModelBase):
    """更新人设（所有字段可选）"""
    persona_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = None
    tone: Optional[str] = None
    conversation_mode: Optional[str] = None
    system_prompt: Optional[str] = None
    question_sequence: Optional[List[QuestionItem]] = None
    scoring_prompt: Optional[str] = None
    email_prompt: Optional[str] = None
    fallback_message: Optional[str] = None
    end_message: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("conversation_mode")
    @classmethod
    def check_mode(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return ConversationMode(v).value


# ==================== 响应 Schema ====================

class PersonaResponse(TimestampResponse):
    """人设详情"""
    role_id: str
    persona_name: str
    bio: Optional[str] = None
    tone: Optional[str] = None
    conversation_mode: str
    system_prompt: Optional[str] = None
    question_sequence: List[QuestionItem] = []
    scoring_prompt: Optional[str] = None
    email_prompt: Optional[str] = None
    fallback_message: Optional[str] = None
    end_message: Optional[str] = None
    avatar_url: Optional[str] = None
