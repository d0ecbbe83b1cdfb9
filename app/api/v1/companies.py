"""
公司管理 API 路由
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
)
from app.core.exceptions import NotFoundException, ConflictException
from app.crud import company_crud
from app.models.company import CompanyCreate, CompanyUpdate, CompanyResponse

router = APIRouter()


@router.get("", summary="List companies", response_model=PagedResponseModel[CompanyResponse])
async def get_companies(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    db: AsyncSession = Depends(get_db),
):
    skip = (page - 1) * page_size
    companies = await company_crud.get_multi(db, skip=skip, limit=page_size)
    total = await company_crud.count(db)
    items = [CompanyResponse.model_validate(c).model_dump() for c in companies]
    return paged_response(items, total, page, page_size)


@router.post("", summary="Create company", response_model=ResponseModel[CompanyResponse])
async def create_company(
    data: CompanyCreate,
    db: AsyncSession = Depends(get_db),
):
    if await company_crud.get_by_name(db, data.name):
        raise ConflictException(f"Company '{data.name}' already exists")

    company = await company_crud.create(db, obj_in=data)
    return success_response(
        data=CompanyResponse.model_validate(company).model_dump(),
        message="Company created"
    )


@router.get("/{company_id}", summary="Get company", response_model=ResponseModel[CompanyResponse])
async def get_company(
    company_id: str,
    db: AsyncSession = Depends(get_db),
):
    company = await company_crud.get(db, company_id)
    if not company:
        raise NotFoundException(f"Company not found: {company_id}")
    return success_response(data=CompanyResponse.model_validate(company).model_dump())


@router.patch("/{company_id}", summary="Update company", response_model=ResponseModel[CompanyResponse])
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    db: AsyncSession = Depends(get_db),
):
    company = await company_crud.get(db, company_id)
    if not company:
        raise NotFoundException(f"Company not found: {company_id}")

    if data.name and data.name != company.name:
        if await company_crud.get_by_name(db, data.name):
            raise ConflictException(f"Company '{data.name}' already exists")

    company = await company_crud.update(db, db_obj=company, obj_in=data)
    return success_response(
        data=CompanyResponse.model_validate(company).model_dump(),
        message="Company updated"
    )
