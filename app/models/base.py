"""
SQLModel 基础模型

定义通用字段和混入类
"""
import uuid
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SQLModelBase(SQLModel):
    """
    基础模型配置

    所有 Schema 类都继承此类
    """
    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "str_strip_whitespace": True,
    }


class TimestampMixin(SQLModel):
    """时间戳混入类（用于表模型）"""
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        description="Created at"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        description="Updated at"
    )


class IDMixin(SQLModel):
    """UUID 主键混入类（用于表模型）"""
    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        description="Primary key"
    )


class TimestampResponse(SQLModelBase):
    """带 ID 和时间戳的响应基类"""
    id: str
    created_at: datetime
    updated_at: datetime
