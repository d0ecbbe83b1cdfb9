"""
职位模型

每个职位属于一家公司，最多关联一个面试官人设
"""
from typing import Optional, List, TYPE_CHECKING
from sqlmodel import Field, Relationship, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse
from .company import CompanyBrief, CompanyResponse
from .persona import PersonaResponse

if TYPE_CHECKING:
    from .company import Company
    from .persona import Persona


# ==================== 基础字段 ====================

class RoleBase(SQLModelBase):
    """职位基础字段"""
    title: str = Field(..., min_length=1, max_length=200, description="Job title", index=True)
    description: Optional[str] = Field(None, description="Job description")
    requirements: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Requirements")
    responsibilities: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Responsibilities")
    location: Optional[str] = Field(None, max_length=200, description="Location")
    level: Optional[str] = Field(None, max_length=50, description="Seniority level")
    salary: Optional[str] = Field(None, max_length=100, description="Salary range text")
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Tags")
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Skills")
    conversation_mode: Optional[str] = Field(None, max_length=20, description="structured/conversational/mixed")
    must_have_assets: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Documents to request")
    expected_response_length: Optional[str] = Field(None, max_length=100, description="Expected answer length")
    ask_for_resume: bool = Field(True, description="Ask for a resume during chat")
    ask_for_portfolio: bool = Field(False, description="Ask for a portfolio during chat")


# ==================== 表模型 ====================

class Role(RoleBase, TimestampMixin, IDMixin, table=True):
    """职位表"""
    __tablename__ = "roles"

    company_id: str = Field(foreign_key="companies.id", index=True, description="Company ID")
    is_active: bool = Field(default=True, index=True, description="Listed")

    company: Optional["Company"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )
    persona: Optional["Persona"] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "uselist": False,
            "cascade": "all, delete-orphan",
        }
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, title={self.title})>"


# ==================== 请求 Schema ====================

class RoleCreate(RoleBase):
    """创建职位"""
    company_id: str = Field(..., description="Company ID")


class RoleUpdate(SQLModelBase):
    """更新职位（所有字段可选）"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    location: Optional[str] = None
    level: Optional[str] = None
    salary: Optional[str] = None
    tags: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    conversation_mode: Optional[str] = None
    must_have_assets: Optional[List[str]] = None
    expected_response_length: Optional[str] = None
    ask_for_resume: Optional[bool] = None
    ask_for_portfolio: Optional[bool] = None
    is_active: Optional[bool] = None


# ==================== 响应 Schema ====================

class RoleListResponse(TimestampResponse):
    """职位列表项"""
    title: str
    location: Optional[str] = None
    level: Optional[str] = None
    salary: Optional[str] = None
    tags: List[str] = []
    company_id: str
    is_active: bool
    company: Optional[CompanyBrief] = None
    has_persona: bool = False


class RoleResponse(TimestampResponse):
    """职位详情"""
    title: str
    description: Optional[str] = None
    requirements: List[str] = []
    responsibilities: List[str] = []
    location: Optional[str] = None
    level: Optional[str] = None
    salary: Optional[str] = None
    tags: List[str] = []
    skills: List[str] = []
    conversation_mode: Optional[str] = None
    must_have_assets: List[str] = []
    expected_response_length: Optional[str] = None
    ask_for_resume: bool = True
    ask_for_portfolio: bool = False
    company_id: str
    is_active: bool


class RoleDetailResponse(SQLModelBase):
    """职位详情（含公司和人设，供聊天窗口使用）"""
    role: RoleResponse
    company: Optional[CompanyResponse] = None
    persona: Optional[PersonaResponse] = None
