"""
CRUD 操作模块
"""
from .company import company_crud
from .role import role_crud
from .persona import persona_crud
from .application import application_crud
from .candidate import candidate_crud

__all__ = [
    "company_crud",
    "role_crud",
    "persona_crud",
    "application_crud",
    "candidate_crud",
]
