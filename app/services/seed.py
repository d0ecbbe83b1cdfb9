"""
演示数据初始化

幂等地写入 SmartJoules 公司、职位及其人设。
已有记录只有在种子字段仍为空时才会被更新
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import company_crud, persona_crud, role_crud
from app.crud.base import CRUDBase

from .seed_data import COMPANY, PERSONAS, ROLES


INSERTED = "inserted"
UPDATED = "updated"
SKIPPED = "skipped"


@dataclass
class SeedReport:
    """seed_database 对每条记录的处理结果"""
    company: Optional[Tuple[str, str]] = None
    roles: List[Tuple[str, str]] = field(default_factory=list)
    personas: List[Tuple[str, str]] = field(default_factory=list)
    problems: List[str] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        counts = {INSERTED: 0, UPDATED: 0, SKIPPED: 0}
        entries = ([self.company] if self.company else []) + self.roles + self.personas
        for _, outcome in entries:
            counts[outcome] += 1
        return counts

    @property
    def ok(self) -> bool:
        return not self.problems

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "roles": self.roles,
            "personas": self.personas,
            "counts": self.counts(),
            "problems": self.problems,
        }


def _is_empty(value: Any) -> bool:
    return value is None or value == [] or value == {} or value == ""


def _missing_fields(db_obj, data: Dict[str, Any]) -> Dict[str, Any]:
    """已存记录中为空的列对应的种子值"""
    return {
        key: value
        for key, value in data.items()
        if _is_empty(getattr(db_obj, key, None)) and not _is_empty(value)
    }


async def _upsert(
    db: AsyncSession,
    crud: CRUDBase,
    existing,
    data: Dict[str, Any],
) -> Tuple[Any, str]:
    if existing is None:
        return await crud.create(db, obj_in=data), INSERTED

    missing = _missing_fields(existing, data)
    if not missing:
        return existing, SKIPPED
    return await crud.update(db, db_obj=existing, obj_in=missing), UPDATED


async def seed_database(db: AsyncSession) -> SeedReport:
    """
    写入演示公司、职位和人设，然后校验关联关系

    事务由调用方负责，这里只 flush 不 commit
    """
    report = SeedReport()

    company, outcome = await _upsert(
        db, company_crud, await company_crud.get_by_name(db, COMPANY["name"]), COMPANY
    )
    report.company = (company.name, outcome)
    logger.info("Company {}: {}", company.name, outcome)

    roles_by_title = {}
    for role_data in ROLES:
        data = {**role_data, "company_id": company.id}
        existing = await role_crud.get_by_title(db, role_data["title"], company_id=company.id)
        role, outcome = await _upsert(db, role_crud, existing, data)
        roles_by_title[role.title] = role
        report.roles.append((role.title, outcome))
        logger.info("Role {}: {}", role.title, outcome)

    for persona_data in PERSONAS:
        data = dict(persona_data)
        role_title = data.pop("role_title")
        role = roles_by_title.get(role_title)
        if role is None:
            report.problems.append(f"No role '{role_title}' for persona {data['persona_name']}")
            continue
        data["role_id"] = role.id
        existing = await persona_crud.get_by_role(db, role.id)
        persona, outcome = await _upsert(db, persona_crud, existing, data)
        report.personas.append((persona.persona_name, outcome))
        logger.info("Persona {} ({}): {}", persona.persona_name, role_title, outcome)

    report.problems.extend(await validate_seed(db, company.id))

    counts = report.counts()
    logger.info(
        "Seed finished: {} inserted, {} updated, {} skipped",
        counts[INSERTED], counts[UPDATED], counts[SKIPPED],
    )
    for problem in report.problems:
        logger.warning("Seed check: {}", problem)
    return report


async def validate_seed(db: AsyncSession, company_id: str) -> List[str]:
    """校验每个种子职位都属于该公司且都有人设"""
    problems = []
    titles = {role["title"] for role in ROLES}
    roles = [r for r in await role_crud.get_by_company(db, company_id) if r.title in titles]

    for title in titles - {r.title for r in roles}:
        problems.append(f"Role '{title}' is not linked to the company")

    for role in roles:
        persona = await persona_crud.get_by_role(db, role.id)
        if persona is None:
            problems.append(f"Role '{role.title}' has no persona")
        elif not persona.question_sequence:
            problems.append(f"Persona {persona.persona_name} has no questions")
    return problems
