"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from litetask.core.store import StoreGroup, create_store_group
from litetask.provider import ProviderConfig, ProviderRegistry


async def _attach_state(app, db_path: str) -> StoreGroup:
    """在 app.state 上装配存储与 Provider（默认 echo，不访问网络）"""
    from litetask.gateway.services.secret_store import InMemorySecretStore

    store_group = await create_store_group(db_path)
    config = ProviderConfig(default_provider="echo")
    app.state.store_group = store_group
    app.state.provider_config = config
    app.state.provider_registry = ProviderRegistry(config)
    app.state.secret_store = InMemorySecretStore()
    return store_group


@pytest_asyncio.fixture
async def attach_state():
    """提供 state 装配函数，供需要多次启动 app 的测试使用"""
    return _attach_state


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path, monkeypatch):
    """集成测试用 FastAPI app"""
    db_path = str(tmp_path / "test.db")
    monkeypatch.setenv("LITETASK_DB_PATH", db_path)

    from litetask.gateway.main import create_app

    app = create_app()
    store_group = await _attach_state(app, db_path)

    yield app

    await store_group.conn.close()


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
