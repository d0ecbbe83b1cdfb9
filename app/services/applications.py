"""
申请提交服务

先校验表单和简历，再存储文件，最后写入申请记录；校验或上传失败时
不写入任何数据
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import BadRequestException, UpstreamException
from app.crud import application_crud, role_crud
from app.models.application import Application, ApplicationCreate
from app.services.storage import (
    APPLY_RESUME_TYPES,
    StorageError,
    build_object_path,
    validate_upload,
)


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s-]{10,}$")


@dataclass
class ResumeFile:
    filename: Optional[str]
    content_type: Optional[str]
    content: bytes = b""
    # 上传声明的大小，content 可能只读取了一部分
    declared_size: Optional[int] = None

    @property
    def size(self) -> int:
        if self.declared_size is not None:
            return self.declared_size
        return len(self.content)


@dataclass
class ApplicationForm:
    role_id: str
    name: str
    email: str
    phone: Optional[str] = None
    cover_letter: Optional[str] = None
    extras: Dict[str, Optional[str]] = field(default_factory=dict)


def validate_applicant(form: ApplicationForm, resume: Optional[ResumeFile]) -> None:
    """
    申请和快速申请共用的字段校验

    Raises:
        BadRequestException: data 中带有逐字段的错误信息
    """
    errors: Dict[str, str] = {}
    if not (form.name or "").strip():
        errors["name"] = "Name is required"
    if not (form.email or "").strip():
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(form.email.strip()):
        errors["email"] = "Invalid email format"
    if not (form.phone or "").strip():
        errors["phone"] = "Phone number is required"
    elif not PHONE_RE.match(re.sub(r"\s+", "", form.phone)):
        errors["phone"] = "Invalid phone number format"
    if resume is None or not resume.filename:
        errors["resume"] = "Resume is required"

    if errors:
        raise BadRequestException("Missing or invalid fields", data={"errors": errors})

    validate_upload(
        resume.filename,
        resume.content_type,
        resume.size,
        APPLY_RESUME_TYPES,
        settings.max_upload_size,
    )


async def submit_application(
    db: AsyncSession,
    storage,
    form: ApplicationForm,
    resume: Optional[ResumeFile],
) -> Application:
    """校验、上传简历、写入申请记录"""
    validate_applicant(form, resume)

    role = await role_crud.get(db, form.role_id)
    if not role:
        logger.warning("Application for unknown role {}", form.role_id)
        raise BadRequestException("Invalid role selected")

    email = form.email.strip()
    path = build_object_path(resume.filename, prefix=f"{role.id}/{email}")
    try:
        resume_url = await storage.upload(
            settings.storage_resume_bucket, path, resume.content, resume.content_type
        )
    except StorageError as exc:
        logger.error("Resume upload failed for role {}: {}", role.id, exc)
        raise UpstreamException("Failed to upload resume. Please try again.")

    application = await application_crud.create(
        db,
        obj_in=ApplicationCreate(
            role_id=role.id,
            applicant_name=form.name.strip(),
            applicant_email=email,
            applicant_phone=(form.phone or "").strip() or None,
            cover_letter=form.cover_letter or "",
            resume_url=resume_url,
            **{k: v for k, v in form.extras.items() if v},
        ),
    )
    logger.info("Application {} submitted for role {} ({})", application.id, role.title, email)
    return application
