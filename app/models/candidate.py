"""
候选人模型

聊天面试结束后的结果：回答记录和评估
"""
from typing import Optional, List
from enum import Enum
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class CandidateStatus(str, Enum):
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFERED = "offered"
    REJECTED = "rejected"


class AnswerItem(SQLModelBase):
    """问答对"""
    q: str
    a: str


class CandidateBase(SQLModelBase):
    name: Optional[str] = Field(None, max_length=200, description="Candidate name")
    email: Optional[str] = Field(None, max_length=200, description="Candidate email", index=True)
    phone: Optional[str] = Field(None, max_length=50)
    answers: List[dict] = Field(default_factory=list, sa_column=Column(JSON), description="Q/A pairs")
    fit_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Fit score 0.0-1.0")
    summary_candidate: Optional[str] = Field(None, description="Summary shown to the candidate")
    summary_recruiter: Optional[str] = Field(None, description="Summary for the recruiter")
    resume_url: Optional[str] = Field(None, max_length=1000)
    portfolio_urls: List[str] = Field(default_factory=list, sa_column=Column(JSON))


class Candidate(CandidateBase, TimestampMixin, IDMixin, table=True):
    """候选人表"""
    __tablename__ = "candidates"

    role_id: str = Field(foreign_key="roles.id", index=True, description="Role ID")
    status: str = Field(default=CandidateStatus.APPLIED.value, max_length=20, index=True)

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, fit_score={self.fit_score})>"


class CandidateCreate(CandidateBase):
    role_id: str
    answers: List[AnswerItem] = Field(default_factory=list)


class CandidateResponse(TimestampResponse):
    role_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    answers: List[AnswerItem] = []
    fit_score: Optional[float] = None
    summary_candidate: Optional[str] = None
    summary_recruiter: Optional[str] = None
    resume_url: Optional[str] = None
    portfolio_urls: List[str] = []
    status: str
