"""
API v1 路由
"""
from . import companies, roles, personas, applications, uploads, chat, llm

__all__ = [
    "companies",
    "roles",
    "personas",
    "applications",
    "uploads",
    "chat",
    "llm",
]
