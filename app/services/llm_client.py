"""
统一的 LLM 客户端封装

单个 AsyncOpenAI 客户端，带并发限制和备用模型列表
"""
import asyncio
from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Any, Optional

from openai import AsyncOpenAI
from loguru import logger

from app.core.config import settings


class LLMUnavailableError(Exception):
    """所有已配置的模型都没有返回结果"""


@dataclass
class LLMReply:
    content: str
    model: str
    used_fallback: bool = False


class ConcurrencyLimiter:
    """并发限制器"""

    def __init__(self, max_concurrency: int):
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def acquire(self):
        await self._semaphore.acquire()

    def release(self):
        self._semaphore.release()


class LLMClient:
    """
    统一的 LLM 客户端，提供并发控制和备用模型切换

    先尝试配置的模型，再依次尝试与其不同的备用模型；全部失败时抛出
    LLMUnavailableError。
    """

    _instance: Optional["LLMClient"] = None
    _lock = Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if getattr(self, "_initialized", False):
            return

        self.model = settings.llm_model
        self.api_key = settings.llm_api_key
        self.base_url = settings.llm_base_url
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        self.timeout = settings.llm_timeout
        self.fallback_models = [
            m for m in settings.llm_fallback_models if m and m != self.model
        ]

        self._client = AsyncOpenAI(
            api_key=self.api_key or "not-configured",
            base_url=self.base_url,
            timeout=self.timeout,
        )
        self._concurrency_limiter = ConcurrencyLimiter(settings.llm_max_concurrency)

        self._initialized = True
        logger.info(
            "LLMClient initialized: model={}, fallbacks={}, max_concurrency={}",
            self.model,
            self.fallback_models,
            settings.llm_max_concurrency,
        )

    async def _create(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        await self._concurrency_limiter.acquire()
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        finally:
            self._concurrency_limiter.release()

        if not response or not response.choices:
            raise ValueError("Empty response from model API")
        content = response.choices[0].message.content
        if not content:
            raise ValueError("Model returned no content")
        return content.strip()

    async def complete_chat(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMReply:
        """
        发送对话请求，失败时按备用模型列表重试

        Args:
            messages: [{"role": ..., "content": ...}]

        Returns:
            LLMReply，包含回复文本和实际使用的模型
        """
        if not self.is_configured():
            raise LLMUnavailableError("LLM API key is not configured")

        temperature = temperature if temperature is not None else self.temperature
        max_tokens = max_tokens or self.max_tokens

        last_error: Optional[Exception] = None
        for index, model in enumerate([self.model, *self.fallback_models]):
            try:
                content = await self._create(model, messages, temperature, max_tokens)
                if index > 0:
                    logger.info("Model {} answered after primary failure", model)
                return LLMReply(content=content, model=model, used_fallback=index > 0)
            except Exception as exc:
                last_error = exc
                logger.warning("Model {} failed: {}", model, exc)

        logger.error("All models failed, last error: {}", last_error)
        raise LLMUnavailableError(str(last_error)) from last_error

    async def complete(self, system_prompt: str, user_prompt: str) -> LLMReply:
        """system + user 两条消息的便捷封装"""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return await self.complete_chat(messages)

    async def test_key(self) -> Dict[str, Any]:
        """发送一个极小的请求来检查 API Key 是否可用"""
        if not self.is_configured():
            return {"valid": False, "error": "LLM API key is not configured"}
        try:
            content = await self._create(
                self.model,
                [{"role": "user", "content": "Hello"}],
                temperature=self.temperature,
                max_tokens=5,
            )
            return {"valid": True, "response": content}
        except Exception as exc:
            logger.warning("API key check failed: {}", exc)
            return {"valid": False, "error": str(exc)}

    def is_configured(self) -> bool:
        """是否已配置 API Key"""
        return bool(self.api_key) and self.api_key != "your-api-key-here"

    def get_status(self) -> Dict[str, Any]:
        """获取当前 LLM 配置状态"""
        return {
            "model": self.model,
            "fallback_models": self.fallback_models,
            "base_url": self.base_url,
            "api_key_configured": self.is_configured(),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "max_concurrency": settings.llm_max_concurrency,
        }


def get_llm_client() -> LLMClient:
    """获取 LLMClient 单例"""
    return LLMClient()
