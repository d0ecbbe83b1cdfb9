"""
API 路由模块
"""
from fastapi import APIRouter

from .v1 import companies, roles, personas, applications, uploads, chat, llm

api_router = APIRouter()

api_router.include_router(
    companies.router,
    prefix="/companies",
    tags=["Companies"]
)
api_router.include_router(
    roles.router,
    prefix="/roles",
    tags=["Roles"]
)
api_router.include_router(
    personas.router,
    prefix="/personas",
    tags=["Personas"]
)
api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["Applications"]
)
api_router.include_router(
    uploads.router,
    prefix="/uploads",
    tags=["Uploads"]
)
api_router.include_router(
    chat.router,
    prefix="/chat",
    tags=["Interview chat"]
)
api_router.include_router(
    llm.router,
    prefix="/llm",
    tags=["LLM"]
)
