"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + Provider 组件初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from litetask.core.config import get_db_path
from litetask.core.store import create_store_group
from litetask.provider import ProviderRegistry, load_provider_config

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import backup, extract, health, history, providers, settings, tasks
from .services.secret_store import API_KEY_SECRET, InMemorySecretStore

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 和 Provider，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    provider_config = load_provider_config()
    registry = ProviderRegistry(provider_config)
    secret_store = InMemorySecretStore.from_env()

    app.state.provider_config = provider_config
    app.state.provider_registry = registry
    app.state.secret_store = secret_store

    log.info(
        "gateway_started",
        db_path=db_path,
        default_provider=str(registry.default_id),
        model=provider_config.model,
        api_key_configured=secret_store.get_secret(API_KEY_SECRET) is not None,
    )

    yield

    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="LiteTask Gateway",
        version="0.1.0",
        description="LiteTask 自然语言任务提取与备份 API",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)

    setup_logging()

    # 固定路径的任务视图需先于 /api/tasks/{task_id} 注册
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(extract.router, tags=["extract"])
    app.include_router(providers.router, tags=["providers"])
    app.include_router(backup.router, tags=["backup"])
    app.include_router(history.router, tags=["history"])
    app.include_router(settings.router, tags=["settings"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
