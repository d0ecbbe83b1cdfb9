"""
Test fixtures

In-memory database, fake model client, fake file storage, HTTP client and
a data factory that creates records through the API.
"""
from typing import AsyncGenerator, List, Optional
from dataclasses import dataclass, field

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401  registers the tables
from app.api.deps import llm_dependency, session_store_dependency, storage_dependency
from app.core.config import settings
from app.core.database import get_db
from app.main import create_app
from app.services.interview import MemorySessionStore
from app.services.llm_client import LLMReply, LLMUnavailableError
from app.services.storage import StorageError


PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


# ========== fakes ==========

class FakeLLM:
    """
    Scripted stand-in for LLMClient

    Replies are popped from `replies`; once empty it answers "Reply N".
    `fail_times` makes the next N calls raise LLMUnavailableError.
    """

    def __init__(self, replies: Optional[List[str]] = None, configured: bool = True):
        self.replies = list(replies or [])
        self.configured = configured
        self.fail_times = 0
        self.always_fail = False
        self.calls: List[list] = []

    def is_configured(self) -> bool:
        return self.configured

    async def complete_chat(self, messages, temperature=None, max_tokens=None) -> LLMReply:
        self.calls.append(messages)
        if not self.configured:
            raise LLMUnavailableError("LLM API key is not configured")
        if self.always_fail or self.fail_times > 0:
            self.fail_times = max(0, self.fail_times - 1)
            raise LLMUnavailableError("model unavailable")
        content = self.replies.pop(0) if self.replies else f"Reply {len(self.calls)}"
        return LLMReply(content=content, model="fake-model")

    async def complete(self, system_prompt: str, user_prompt: str) -> LLMReply:
        return await self.complete_chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ]
        )

    async def test_key(self) -> dict:
        if not self.configured:
            return {"valid": False, "error": "LLM API key is not configured"}
        return {"valid": True, "response": "Hello"}

    def get_status(self) -> dict:
        return {"model": "fake-model", "api_key_configured": self.configured}


class FakeStorage:
    """Records uploads and returns predictable URLs"""

    def __init__(self):
        self.uploads: List[dict] = []
        self.fail = False

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageError("storage is down")
        self.uploads.append({
            "bucket": bucket,
            "path": path,
            "size": len(content),
            "content_type": content_type,
        })
        return f"https://files.test/{bucket}/{path}"


# ========== data factory ==========

@dataclass
class DataFactory:
    """
    Creates test records through the API

    Field changes only need updating here
    """
    client: AsyncClient
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        self._counter += 1
        return str(self._counter)

    async def create_company(self, **overrides) -> dict:
        suffix = self._next_id()
        data = {
            "name": f"Test Company {suffix}",
            "industry": "Energy Efficiency",
            "tone": "Friendly and direct",
            "cultural_keywords": ["impact-driven", "fast-paced"],
            "hr_contact_email": "hr@test.example",
            **overrides
        }
        resp = await self.client.post("/api/v1/companies", json=data)
        assert resp.status_code == 200, f"create company failed: {resp.text}"
        return resp.json()["data"]

    async def create_role(self, company_id: Optional[str] = None, **overrides) -> dict:
        if company_id is None:
            company = await self.create_company()
            company_id = company["id"]

        suffix = self._next_id()
        data = {
            "company_id": company_id,
            "title": f"Test Engineer {suffix}",
            "description": "Builds and runs building automation projects",
            "location": "New Delhi",
            "requirements": ["Python", "HVAC basics"],
            "tags": ["Engineering", "BMS"],
            "must_have_assets": ["resume"],
            **overrides
        }
        resp = await self.client.post("/api/v1/roles", json=data)
        assert resp.status_code == 200, f"create role failed: {resp.text}"
        return resp.json()["data"]

    async def create_persona(
        self,
        role_id: Optional[str] = None,
        questions: int = 3,
        **overrides
    ) -> dict:
        if role_id is None:
            role = await self.create_role()
            role_id = role["id"]

        data = {
            "role_id": role_id,
            "persona_name": "Asha Rao",
            "tone": "Warm and precise",
            "conversation_mode": "structured",
            "question_sequence": [
                {"id": f"q{i}", "text": f"Question number {i}?", "type": "open"}
                for i in range(1, questions + 1)
            ],
            "end_message": "Thanks, our team will be in touch.",
            "fallback_message": "Please email hr@test.example",
            **overrides
        }
        resp = await self.client.post("/api/v1/personas", json=data)
        assert resp.status_code == 200, f"create persona failed: {resp.text}"
        return resp.json()["data"]


# ========== database ==========

@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fresh in-memory database per test

    StaticPool keeps the single connection alive so every session sees the
    same tables.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ========== fakes ==========

@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore(ttl_seconds=3600)


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(settings, "chat_retry_delay", 0)


# ========== HTTP client ==========

@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory,
    fake_llm: FakeLLM,
    fake_storage: FakeStorage,
    session_store: MemorySessionStore,
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client against the app

    Each request gets its own session, like get_db does in production.
    """
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[llm_dependency] = lambda: fake_llm
    app.dependency_overrides[storage_dependency] = lambda: fake_storage
    app.dependency_overrides[session_store_dependency] = lambda: session_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def factory(client: AsyncClient) -> DataFactory:
    return DataFactory(client=client)
