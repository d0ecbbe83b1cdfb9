"""
人设 CRUD 操作
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.persona import Persona
from .base import CRUDBase


class CRUDPersona(CRUDBase[Persona]):
    """人设 CRUD"""

    async def get_by_role(self, db: AsyncSession, role_id: str) -> Optional[Persona]:
        """获取职位关联的人设"""
        result = await db.execute(
            select(self.model).where(self.model.role_id == role_id)
        )
        return result.scalar_one_or_none()


persona_crud = CRUDPersona(Persona)
