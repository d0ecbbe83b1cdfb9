"""
服务层模块
"""
from .llm_client import (
    LLMClient,
    LLMReply,
    LLMUnavailableError,
    get_llm_client,
)
from .storage import (
    LocalStorage,
    SupabaseStorage,
    StorageError,
    get_storage,
)

__all__ = [
    "LLMClient",
    "LLMReply",
    "LLMUnavailableError",
    "get_llm_client",
    "LocalStorage",
    "SupabaseStorage",
    "StorageError",
    "get_storage",
]
