"""
路由共用的依赖

每个依赖都是普通函数，测试可以通过 app.dependency_overrides 替换
"""
from fastapi import Depends

from app.services.chat_service import InterviewChatService
from app.services.interview import MemorySessionStore, get_session_store
from app.services.llm_client import LLMClient, get_llm_client
from app.services.storage import get_storage


def llm_dependency() -> LLMClient:
    return get_llm_client()


def storage_dependency():
    return get_storage()


def session_store_dependency() -> MemorySessionStore:
    return get_session_store()


def chat_service_dependency(
    llm: LLMClient = Depends(llm_dependency),
    store: MemorySessionStore = Depends(session_store_dependency),
    storage=Depends(storage_dependency),
) -> InterviewChatService:
    return InterviewChatService(llm, store, storage)
