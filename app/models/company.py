"""
公司模型
"""
from typing import Optional, List, Dict, Any
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


# ==================== 基础字段 ====================

class CompanyBase(SQLModelBase):
    """公司基础字段（创建和表模型共用）"""
    name: str = Field(..., min_length=1, max_length=200, description="Company name", index=True, unique=True)
    website: Optional[str] = Field(None, max_length=255, description="Website")
    industry: Optional[str] = Field(None, max_length=100, description="Industry")
    description: Optional[str] = Field(None, description="About the company")
    tagline: Optional[str] = Field(None, max_length=255, description="Tagline")
    vision: Optional[str] = Field(None, description="Vision statement")
    values: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Company values")
    culture: Optional[str] = Field(None, description="Culture description")
    tone: Optional[str] = Field(None, max_length=200, description="Default interviewer tone")
    cultural_keywords: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Culture keywords")
    hr_contact_email: Optional[str] = Field(None, max_length=200, description="HR contact email")
    logo_url: Optional[str] = Field(None, max_length=500, description="Logo URL")
    size: Optional[str] = Field(None, max_length=100, description="Headcount band")
    faq: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON), description="FAQ entries {q, a}")
    policy_urls: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Policy links")
    persona_context: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON), description="Extra persona context")


# ==================== 表模型 ====================

class Company(CompanyBase, TimestampMixin, IDMixin, table=True):
    """公司表"""
    __tablename__ = "companies"

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name})>"


# ==================== 请求 Schema ====================

class CompanyCreate(CompanyBase):
    """创建公司"""
    pass


class CompanyUpdate(SQLModelBase):
    """更新公司（所有字段可选）"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    tagline: Optional[str] = None
    vision: Optional[str] = None
    values: Optional[List[str]] = None
    culture: Optional[str] = None
    tone: Optional[str] = None
    cultural_keywords: Optional[List[str]] = None
    hr_contact_email: Optional[str] = None
    logo_url: Optional[str] = None
    size: Optional[str] = None
    faq: Optional[List[Dict[str, str]]] = None
    policy_urls: Optional[List[str]] = None
    persona_context: Optional[Dict[str, Any]] = None


# ==================== 响应 Schema ====================

class CompanyResponse(TimestampResponse):
    """公司详情"""
    name: str
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    tagline: Optional[str] = None
    vision: Optional[str] = None
    values: List[str] = []
    culture: Optional[str] = None
    tone: Optional[str] = None
    cultural_keywords: List[str] = []
    hr_contact_email: Optional[str] = None
    logo_url: Optional[str] = None
    size: Optional[str] = None
    faq: List[Dict[str, str]] = []
    policy_urls: List[str] = []
    persona_context: Dict[str, Any] = {}


class CompanyBrief(SQLModelBase):
    """公司简要信息（嵌入职位列表）"""
    id: str
    name: str
    industry: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
