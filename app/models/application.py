"""
投递申请模型

记录申请表/快速申请的提交内容，关联职位、申请人联系方式和简历地址
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlmodel import Field, Relationship

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse, utcnow

if TYPE_CHECKING:
    from .role import Role


class ApplicationStatus(str, Enum):
    """申请状态"""
    PENDING = "pending"        # 已提交，待查看
    REVIEWING = "reviewing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# ==================== 基础字段 ====================

class ApplicationBase(SQLModelBase):
    """申请基础字段"""
    applicant_name: str = Field(..., min_length=1, max_length=200, description="Applicant name")
    applicant_email: str = Field(..., min_length=3, max_length=200, description="Applicant email", index=True)
    applicant_phone: Optional[str] = Field(None, max_length=50, description="Phone")
    cover_letter: Optional[str] = Field(None, description="Cover letter")
    resume_url: Optional[str] = Field(None, max_length=1000, description="Stored resume URL")

    # 快速申请附加字段
    linkedin_url: Optional[str] = Field(None, max_length=500)
    github_url: Optional[str] = Field(None, max_length=500)
    portfolio_url: Optional[str] = Field(None, max_length=500)
    years_of_experience: Optional[str] = Field(None, max_length=50)
    education: Optional[str] = Field(None, max_length=500)
    current_company: Optional[str] = Field(None, max_length=200)
    availability: Optional[str] = Field(None, max_length=200)
    salary_expectation: Optional[str] = Field(None, max_length=200)
    referral_source: Optional[str] = Field(None, max_length=200)
    questions: Optional[str] = Field(None, description="Questions for the recruiter")


# ==================== 表模型 ====================

class Application(ApplicationBase, TimestampMixin, IDMixin, table=True):
    """申请表"""
    __tablename__ = "applications"

    role_id: str = Field(foreign_key="roles.id", index=True, description="Role ID")
    status: str = Field(default=ApplicationStatus.PENDING.value, max_length=20, index=True, description="Status")
    applied_at: datetime = Field(default_factory=utcnow, nullable=False, description="Submitted at")

    role: Optional["Role"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, status={self.status})>"


# ==================== 请求 Schema ====================

class ApplicationCreate(ApplicationBase):
    """创建申请（简历上传后由申请路由构造）"""
    role_id: str


class ApplicationUpdate(SQLModelBase):
    """管理端更新（仅状态）"""
    status: ApplicationStatus


# ==================== 响应 Schema ====================

class ApplicationResponse(TimestampResponse):
    """申请详情"""
    role_id: str
    role_title: Optional[str] = None
    applicant_name: str
    applicant_email: str
    applicant_phone: Optional[str] = None
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    years_of_experience: Optional[str] = None
    education: Optional[str] = None
    current_company: Optional[str] = None
    availability: Optional[str] = None
    salary_expectation: Optional[str] = None
    referral_source: Optional[str] = None
    questions: Optional[str] = None
    status: str
    applied_at: datetime


class ApplicationListResponse(TimestampResponse):
    """申请列表项"""
    role_id: str
    role_title: Optional[str] = None
    applicant_name: str
    applicant_email: str
    status: str
    applied_at: datetime


class ApplicationStats(SQLModelBase):
    """按状态统计"""
    total: int = 0
    by_status: dict = {}
