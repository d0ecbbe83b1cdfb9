"""
职位 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.role import Role
from .base import CRUDBase


class CRUDRole(CRUDBase[Role]):
    """职位 CRUD"""

    def _filtered(
        self,
        query,
        *,
        company_id: Optional[str] = None,
        keyword: Optional[str] = None,
        is_active: Optional[bool] = None,
    ):
        if company_id:
            query = query.where(self.model.company_id == company_id)
        if is_active is not None:
            query = query.where(self.model.is_active == is_active)
        if keyword:
            pattern = f"%{keyword}%"
            query = query.where(
                or_(
                    self.model.title.ilike(pattern),
                    self.model.description.ilike(pattern),
                    self.model.location.ilike(pattern),
                )
            )
        return query

    async def get_by_title(
        self,
        db: AsyncSession,
        title: str,
        company_id: Optional[str] = None
    ) -> Optional[Role]:
        """按标题查找职位，可限定公司"""
        query = select(self.model).where(self.model.title == title)
        if company_id:
            query = query.where(self.model.company_id == company_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_company(self, db: AsyncSession, company_id: str) -> List[Role]:
        """获取公司的所有职位"""
        result = await db.execute(
            select(self.model)
            .where(self.model.company_id == company_id)
            .order_by(self.model.created_at)
        )
        return list(result.scalars().all())

    async def search(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 20,
        company_id: Optional[str] = None,
        tag: Optional[str] = None,
        keyword: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> tuple[List[Role], int]:
        """
        按条件筛选职位

        标签存储在 JSON 列中，标签过滤在 SQL 过滤之后、分页之前用 Python 完成

        Returns:
            (当前页职位, 匹配总数)
        """
        query = self._filtered(
            select(self.model),
            company_id=company_id,
            keyword=keyword,
            is_active=is_active,
        ).order_by(self.model.created_at.desc())

        if tag:
            result = await db.execute(query)
            wanted = tag.lower()
            rows = [
                r for r in result.scalars().all()
                if any(t.lower() == wanted for t in (r.tags or []))
            ]
            return rows[skip:skip + limit], len(rows)

        count_query = self._filtered(
            select(func.count()).select_from(self.model),
            company_id=company_id,
            keyword=keyword,
            is_active=is_active,
        )
        total = (await db.execute(count_query)).scalar() or 0
        result = await db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all()), total


role_crud = CRUDRole(Role)
