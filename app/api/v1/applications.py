"""
申请管理 API 路由

申请和快速申请接收带简历文件的 multipart 表单；管理端路由负责列表、
详情和状态流转
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Form, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import storage_dependency
from app.core.database import get_db
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
)
from app.core.exceptions import NotFoundException
from app.crud import application_crud, role_crud
from app.models.application import (
    Application,
    ApplicationStatus,
    ApplicationUpdate,
    ApplicationResponse,
    ApplicationListResponse,
    ApplicationStats,
)
from app.services.applications import ApplicationForm, ResumeFile, submit_application
from app.services.storage import read_upload

router = APIRouter()


async def _read_resume(resume: Optional[UploadFile]) -> Optional[ResumeFile]:
    if resume is None or not resume.filename:
        return None
    content, size = await read_upload(resume)
    return ResumeFile(
        filename=resume.filename,
        content_type=resume.content_type,
        content=content,
        declared_size=size,
    )


def _detail(application: Application, role=None) -> dict:
    item = ApplicationResponse.model_validate(application)
    role = role or application.role
    if role:
        item.role_title = role.title
    return item.model_dump()


async def _with_role(db: AsyncSession, application: Application) -> dict:
    # 刚插入或刷新的记录不会加载 role 关系
    return _detail(application, await role_crud.get(db, application.role_id))


# ==================== 提交 ====================

@router.post("/apply", summary="Apply to a role", response_model=ResponseModel[ApplicationResponse])
async def apply(
    role_id: str = Form(..., description="Role ID"),
    name: str = Form("", description="Applicant name"),
    email: str = Form("", description="Applicant email"),
    phone: str = Form("", description="Phone number"),
    cover_letter: str = Form("", description="Cover letter"),
    resume: Optional[UploadFile] = File(None, description="Resume (PDF, DOC or DOCX, max 5MB)"),
    db: AsyncSession = Depends(get_db),
    storage=Depends(storage_dependency),
):
    """
    提交申请表

    字段缺失、简历不合格或职位不存在时返回 400，不会存储任何内容
    """
    form = ApplicationForm(
        role_id=role_id,
        name=name,
        email=email,
        phone=phone,
        cover_letter=cover_letter,
    )
    application = await submit_application(db, storage, form, await _read_resume(resume))
    return success_response(data=await _with_role(db, application), message="Application submitted successfully")


@router.post("/quick-apply/{role_id}", summary="Quick apply with profile details", response_model=ResponseModel[ApplicationResponse])
async def quick_apply(
    role_id: str,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    cover_letter: str = Form(""),
    linkedin_url: Optional[str] = Form(None),
    github_url: Optional[str] = Form(None),
    portfolio_url: Optional[str] = Form(None),
    years_of_experience: Optional[str] = Form(None),
    education: Optional[str] = Form(None),
    current_company: Optional[str] = Form(None),
    availability: Optional[str] = Form(None),
    salary_expectation: Optional[str] = Form(None),
    referral_source: Optional[str] = Form(None),
    questions: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage=Depends(storage_dependency),
):
    form = ApplicationForm(
        role_id=role_id,
        name=name,
        email=email,
        phone=phone,
        cover_letter=cover_letter,
        extras={
            "linkedin_url": linkedin_url,
            "github_url": github_url,
            "portfolio_url": portfolio_url,
            "years_of_experience": years_of_experience,
            "education": education,
            "current_company": current_company,
            "availability": availability,
            "salary_expectation": salary_expectation,
            "referral_source": referral_source,
            "questions": questions,
        },
    )
    application = await submit_application(db, storage, form, await _read_resume(resume))
    return success_response(data=await _with_role(db, application), message="Application submitted successfully")


# ==================== 管理端 ====================

@router.get("", summary="List applications", response_model=PagedResponseModel[ApplicationListResponse])
async def get_applications(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    role_id: Optional[str] = Query(None, description="Filter by role"),
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db),
):
    skip = (page - 1) * page_size
    status_value = status.value if status else None
    applications = await application_crud.get_filtered(
        db, skip=skip, limit=page_size, role_id=role_id, status=status_value
    )
    total = await application_crud.count_filtered(db, role_id=role_id, status=status_value)

    items = []
    for a in applications:
        item = ApplicationListResponse.model_validate(a)
        if a.role:
            item.role_title = a.role.title
        items.append(item.model_dump())

    return paged_response(items, total, page, page_size)


@router.get("/stats/overview", summary="Application counts by status", response_model=ResponseModel[ApplicationStats])
async def get_application_stats(db: AsyncSession = Depends(get_db)):
    by_status = await application_crud.count_by_status(db)
    stats = ApplicationStats(total=sum(by_status.values()), by_status=by_status)
    return success_response(data=stats.model_dump())


@router.get("/{application_id}", summary="Get application", response_model=ResponseModel[ApplicationResponse])
async def get_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
):
    application = await application_crud.get(db, application_id)
    if not application:
        raise NotFoundException(f"Application not found: {application_id}")
    return success_response(data=_detail(application))


@router.patch("/{application_id}", summary="Update application status", response_model=ResponseModel[ApplicationResponse])
async def update_application(
    application_id: str,
    data: ApplicationUpdate,
    db: AsyncSession = Depends(get_db),
):
    application = await application_crud.get(db, application_id)
    if not application:
        raise NotFoundException(f"Application not found: {application_id}")

    application = await application_crud.update(
        db, db_obj=application, obj_in={"status": data.status.value}
    )
    return success_response(data=await _with_role(db, application), message="Application updated")
