"""依赖注入模块 -- 通过 FastAPI Depends 注入服务实例

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from litetask.core.store import StoreGroup
from litetask.provider import ProviderRegistry

from .services.extraction_service import ExtractionService
from .services.secret_store import InMemorySecretStore


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_registry(request: Request) -> ProviderRegistry:
    """从 app.state 获取 ProviderRegistry 实例"""
    return request.app.state.provider_registry


def get_secret_store(request: Request) -> InMemorySecretStore:
    return request.app.state.secret_store


def get_extraction_service(request: Request) -> ExtractionService:
    """基于当前 app.state 组装 ExtractionService"""
    return ExtractionService(
        store_group=request.app.state.store_group,
        registry=request.app.state.provider_registry,
        secret_store=request.app.state.secret_store,
    )
