"""
LLM 状态 API 路由
"""
from fastapi import APIRouter, Depends

from app.api.deps import llm_dependency
from app.core.response import success_response, DictResponse
from app.services.llm_client import LLMClient

router = APIRouter()


@router.get("/status", summary="LLM configuration status", response_model=DictResponse)
async def get_llm_status(llm: LLMClient = Depends(llm_dependency)):
    return success_response(data=llm.get_status())


@router.get("/test-key", summary="Probe the configured API key", response_model=DictResponse)
async def test_llm_key(llm: LLMClient = Depends(llm_dependency)):
    """
    发送一个 5 token 的请求；Key 无效时在 data 中说明，不作为错误返回
    """
    result = await llm.test_key()
    message = "API key is valid" if result.get("valid") else "API key check failed"
    return success_response(data=result, message=message)
