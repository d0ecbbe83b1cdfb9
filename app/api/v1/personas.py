"""
人设管理 API 路由
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import success_response, ResponseModel
from app.core.exceptions import NotFoundException, ConflictException, BadRequestException
from app.crud import persona_crud, role_crud
from app.models.persona import PersonaCreate, PersonaUpdate, PersonaResponse

router = APIRouter()


@router.post("", summary="Attach a persona to a role", response_model=ResponseModel[PersonaResponse])
async def create_persona(
    data: PersonaCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    每个职位只能有一个人设，重复创建会被拒绝
    """
    if not await role_crud.get(db, data.role_id):
        raise BadRequestException(f"Unknown role: {data.role_id}")
    if await persona_crud.get_by_role(db, data.role_id):
        raise ConflictException("This role already has a persona")

    persona = await persona_crud.create(db, obj_in=data)
    return success_response(
        data=PersonaResponse.model_validate(persona).model_dump(),
        message="Persona created"
    )


@router.get("/{persona_id}", summary="Get persona", response_model=ResponseModel[PersonaResponse])
async def get_persona(
    persona_id: str,
    db: AsyncSession = Depends(get_db),
):
    persona = await persona_crud.get(db, persona_id)
    if not persona:
        raise NotFoundException(f"Persona not found: {persona_id}")
    return success_response(data=PersonaResponse.model_validate(persona).model_dump())


@router.patch("/{persona_id}", summary="Update persona", response_model=ResponseModel[PersonaResponse])
async def update_persona(
    persona_id: str,
    data: PersonaUpdate,
    db: AsyncSession = Depends(get_db),
):
    persona = await persona_crud.get(db, persona_id)
    if not persona:
        raise NotFoundException(f"Persona not found: {persona_id}")

    persona = await persona_crud.update(db, db_obj=persona, obj_in=data.model_dump(exclude_unset=True))
    return success_response(
        data=PersonaResponse.model_validate(persona).model_dump(),
        message="Persona updated"
    )
