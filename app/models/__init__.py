"""
SQLModel 模型模块

表模型与对应的请求/响应 Schema 定义在同一文件中
"""
from .base import SQLModelBase, TimestampMixin
from .company import Company, CompanyCreate, CompanyUpdate, CompanyResponse, CompanyBrief
from .persona import (
    Persona, PersonaCreate, PersonaUpdate, PersonaResponse,
    ConversationMode, QuestionItem, QuestionType
)
from .role import Role, RoleCreate, RoleUpdate, RoleResponse, RoleListResponse, RoleDetailResponse
from .application import (
    Application, ApplicationCreate, ApplicationUpdate,
    ApplicationResponse, ApplicationListResponse, ApplicationStats, ApplicationStatus
)
from .candidate import Candidate, CandidateCreate, CandidateResponse, CandidateStatus, AnswerItem

__all__ = [
    # 基础
    "SQLModelBase",
    "TimestampMixin",
    # Company
    "Company",
    "CompanyCreate",
    "CompanyUpdate",
    "CompanyResponse",
    "CompanyBrief",
    # Persona
    "Persona",
    "PersonaCreate",
    "PersonaUpdate",
    "PersonaResponse",
    "ConversationMode",
    "QuestionItem",
    "QuestionType",
    # Role
    "Role",
    "RoleCreate",
    "RoleUpdate",
    "RoleResponse",
    "RoleListResponse",
    "RoleDetailResponse",
    # Application
    "Application",
    "ApplicationCreate",
    "ApplicationUpdate",
    "ApplicationResponse",
    "ApplicationListResponse",
    "ApplicationStats",
    "ApplicationStatus",
    # Candidate
    "Candidate",
    "CandidateCreate",
    "CandidateResponse",
    "CandidateStatus",
    "AnswerItem",
]
