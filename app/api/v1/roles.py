"""
职位管理 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    MessageResponse,
)
from app.core.exceptions import NotFoundException, ConflictException, BadRequestException
from app.crud import role_crud, company_crud, persona_crud
from app.models.company import CompanyResponse
from app.models.persona import PersonaResponse
from app.models.role import (
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RoleListResponse,
    RoleDetailResponse,
)

router = APIRouter()


@router.get("", summary="List roles", response_model=PagedResponseModel[RoleListResponse])
async def get_roles(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    company_id: Optional[str] = Query(None, description="Filter by company"),
    tag: Optional[str] = Query(None, description="Filter by tag (case-insensitive)"),
    keyword: Optional[str] = Query(None, description="Search title, description and location"),
    is_active: Optional[bool] = Query(None, description="Listed roles only"),
    db: AsyncSession = Depends(get_db),
):
    """
    按条件获取职位列表（最新的在前）
    """
    skip = (page - 1) * page_size
    roles, total = await role_crud.search(
        db,
        skip=skip,
        limit=page_size,
        company_id=company_id,
        tag=tag,
        keyword=keyword,
        is_active=is_active,
    )

    items = []
    for r in roles:
        item = RoleListResponse.model_validate(r)
        item.has_persona = r.persona is not None
        items.append(item.model_dump())

    return paged_response(items, total, page, page_size)


@router.post("", summary="Create role", response_model=ResponseModel[RoleResponse])
async def create_role(
    data: RoleCreate,
    db: AsyncSession = Depends(get_db),
):
    if not await company_crud.get(db, data.company_id):
        raise BadRequestException(f"Unknown company: {data.company_id}")
    if await role_crud.get_by_title(db, data.title, company_id=data.company_id):
        raise ConflictException(f"Role '{data.title}' already exists for this company")

    role = await role_crud.create(db, obj_in=data)
    return success_response(
        data=RoleResponse.model_validate(role).model_dump(),
        message="Role created"
    )


@router.get("/{role_id}", summary="Get role with company and persona", response_model=ResponseModel[RoleDetailResponse])
async def get_role(
    role_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    获取职位详情（聊天窗口所需的全部信息）
    """
    role = await role_crud.get(db, role_id)
    if not role:
        raise NotFoundException(f"Role not found: {role_id}")

    detail = RoleDetailResponse(
        role=RoleResponse.model_validate(role),
        company=CompanyResponse.model_validate(role.company) if role.company else None,
        persona=PersonaResponse.model_validate(role.persona) if role.persona else None,
    )
    return success_response(data=detail.model_dump())


@router.get("/{role_id}/persona", summary="Get the persona of a role", response_model=ResponseModel[PersonaResponse])
async def get_role_persona(
    role_id: str,
    db: AsyncSession = Depends(get_db),
):
    if not await role_crud.get(db, role_id):
        raise NotFoundException(f"Role not found: {role_id}")

    persona = await persona_crud.get_by_role(db, role_id)
    if not persona:
        raise NotFoundException(f"No persona for role: {role_id}")
    return success_response(data=PersonaResponse.model_validate(persona).model_dump())


@router.patch("/{role_id}", summary="Update role", response_model=ResponseModel[RoleResponse])
async def update_role(
    role_id: str,
    data: RoleUpdate,
    db: AsyncSession = Depends(get_db),
):
    role = await role_crud.get(db, role_id)
    if not role:
        raise NotFoundException(f"Role not found: {role_id}")

    if data.title and data.title != role.title:
        if await role_crud.get_by_title(db, data.title, company_id=role.company_id):
            raise ConflictException(f"Role '{data.title}' already exists for this company")

    role = await role_crud.update(db, db_obj=role, obj_in=data)
    return success_response(
        data=RoleResponse.model_validate(role).model_dump(),
        message="Role updated"
    )


@router.delete("/{role_id}", summary="Delete role", response_model=MessageResponse)
async def delete_role(
    role_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    删除职位及其人设
    """
    if not await role_crud.delete(db, id=role_id):
        raise NotFoundException(f"Role not found: {role_id}")
    return success_response(message="Role deleted")
