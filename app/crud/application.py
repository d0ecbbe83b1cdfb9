"""
申请 CRUD 操作
"""
from typing import Optional, List, Dict
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.application import Application, ApplicationStatus
from .base import CRUDBase


class CRUDApplication(CRUDBase[Application]):
    """申请 CRUD"""

    def _filtered(self, query, role_id: Optional[str], status: Optional[str]):
        if role_id:
            query = query.where(self.model.role_id == role_id)
        if status:
            query = query.where(self.model.status == status)
        return query

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 20,
        role_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Application]:
        """按条件获取申请列表（最新的在前）"""
        query = self._filtered(select(self.model), role_id, status)
        result = await db.execute(
            query.order_by(self.model.applied_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_filtered(
        self,
        db: AsyncSession,
        *,
        role_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> int:
        query = self._filtered(select(func.count()).select_from(self.model), role_id, status)
        result = await db.execute(query)
        return result.scalar() or 0

    async def count_by_status(self, db: AsyncSession) -> Dict[str, int]:
        """按状态统计数量，无记录的状态补 0"""
        result = await db.execute(
            select(self.model.status, func.count())
            .group_by(self.model.status)
        )
        counts = {s.value: 0 for s in ApplicationStatus}
        for status, count in result.all():
            counts[status] = count
        return counts


application_crud = CRUDApplication(Application)
