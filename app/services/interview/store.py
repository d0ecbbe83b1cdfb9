"""
内存面试会话存储

进程内存储，使用 asyncio.Lock 保护，条目在 TTL 后过期。
过期条目在访问时惰性删除，也会被 start() 到 close() 之间运行的后台清理
任务删除
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from loguru import logger

from app.core.config import settings
from .session import InterviewSession


@dataclass
class MemoryEntry:
    value: InterviewSession
    expires_at: Optional[datetime] = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now() >= self.expires_at


class MemorySessionStore:
    """
    以会话 ID 为键的会话存储

    示例:
        store = MemorySessionStore(ttl_seconds=3600)
        await store.start()
        await store.set(session)
        session = await store.get(session.session_id)
        await store.close()
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        cleanup_interval: Optional[float] = None,
    ):
        self._data: Dict[str, MemoryEntry] = {}
        self._lock = asyncio.Lock()
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.chat_session_ttl
        self._cleanup_interval = (
            cleanup_interval if cleanup_interval is not None else settings.chat_cleanup_interval
        )
        self._cleanup_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """启动后台清理任务"""
        if self._cleanup_task is not None:
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())
        logger.info("Session store started (cleanup_interval={}s)", self._cleanup_interval)

    async def close(self) -> None:
        """停止后台清理任务并清空所有会话"""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
        async with self._lock:
            self._data.clear()
        logger.info("Session store closed")

    @property
    def is_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    async def _cleanup_loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self._cleanup_interval)
                await self.purge_expired()
            except asyncio.CancelledError:
                logger.debug("Session cleanup loop cancelled")
                break
            except Exception as e:
                logger.error(f"Session cleanup error: {e}")

    async def get(self, session_id: str) -> Optional[InterviewSession]:
        """获取会话，不存在或已过期时返回 None"""
        async with self._lock:
            entry = self._data.get(session_id)
            if entry is None:
                return None
            if entry.is_expired:
                del self._data[session_id]
                logger.debug("Session {} expired", session_id)
                return None
            return entry.value

    async def set(self, session: InterviewSession) -> None:
        """写入或刷新会话，并重新计算 TTL"""
        async with self._lock:
            expires_at = None
            if self._ttl:
                expires_at = datetime.now() + timedelta(seconds=self._ttl)
            self._data[session.session_id] = MemoryEntry(value=session, expires_at=expires_at)

    async def delete(self, session_id: str) -> bool:
        async with self._lock:
            if session_id in self._data:
                del self._data[session_id]
                return True
            return False

    async def purge_expired(self) -> int:
        """清理所有过期会话，返回清理数量"""
        async with self._lock:
            expired = [k for k, v in self._data.items() if v.is_expired]
            for key in expired:
                del self._data[key]
        if expired:
            logger.info("Purged {} expired chat sessions", len(expired))
        return len(expired)

    async def count(self) -> int:
        async with self._lock:
            return len(self._data)


_store: Optional[MemorySessionStore] = None


def get_session_store() -> MemorySessionStore:
    """获取进程级会话存储单例"""
    global _store
    if _store is None:
        _store = MemorySessionStore()
    return _store
