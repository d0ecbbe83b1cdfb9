"""
公司 CRUD 操作
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from .base import CRUDBase


class CRUDCompany(CRUDBase[Company]):
    """公司 CRUD"""

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Company]:
        """按名称精确查找公司"""
        result = await db.execute(
            select(self.model).where(self.model.name == name)
        )
        return result.scalar_one_or_none()


company_crud = CRUDCompany(Company)
