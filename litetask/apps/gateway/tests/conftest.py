"""apps/gateway 测试配置 -- httpx AsyncClient + 手动初始化的 app

绕过 lifespan，直接在 app.state 上装配 StoreGroup / ProviderRegistry / SecretStore；
DeepSeek 后端由 httpx.MockTransport 模拟。
"""

import json
from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from litetask.core.store import create_store_group
from litetask.provider import (
    DeepSeekProvider,
    EchoProvider,
    ProviderConfig,
    ProviderId,
    ProviderRegistry,
)


class FakeBackend:
    """可编程的 chat/completions 后端"""

    def __init__(self) -> None:
        self.status_code = 200
        self.content = "[]"
        self.requests: list[httpx.Request] = []

    def reply_tasks(self, tasks: list[dict]) -> None:
        self.status_code = 200
        self.content = json.dumps(tasks, ensure_ascii=False)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="backend error")
        if request.url.path.endswith("/models"):
            return httpx.Response(200, json={"data": [{"id": "deepseek-chat"}]})
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": self.content}}]},
        )


@pytest_asyncio.fixture
async def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, backend: FakeBackend, monkeypatch):
    """创建测试用 FastAPI app 实例（手动初始化 state）"""
    db_path = str(tmp_path / "sqlite" / "test.db")
    monkeypatch.setenv("LITETASK_DB_PATH", db_path)
    monkeypatch.delenv("LITETASK_API_KEY", raising=False)

    from litetask.gateway.main import create_app
    from litetask.gateway.services.secret_store import InMemorySecretStore

    app = create_app()

    store_group = await create_store_group(db_path)
    config = ProviderConfig()
    app.state.store_group = store_group
    app.state.provider_config = config
    app.state.provider_registry = ProviderRegistry(
        config,
        providers={
            ProviderId.DEEPSEEK_V3_2: DeepSeekProvider(
                config,
                transport=httpx.MockTransport(backend),
            ),
            ProviderId.ECHO: EchoProvider(),
        },
    )
    app.state.secret_store = InMemorySecretStore()

    yield app

    await store_group.conn.close()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
