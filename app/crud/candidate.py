"""
候选人 CRUD 操作
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.candidate import Candidate
from .base import CRUDBase


class CRUDCandidate(CRUDBase[Candidate]):
    """候选人 CRUD"""

    async def get_by_role(self, db: AsyncSession, role_id: str) -> List[Candidate]:
        """获取职位的候选人（匹配度高的在前）"""
        result = await db.execute(
            select(self.model)
            .where(self.model.role_id == role_id)
            .order_by(self.model.fit_score.desc(), self.model.created_at.desc())
        )
        return list(result.scalars().all())


candidate_crud = CRUDCandidate(Candidate)
