"""Provider 路由

GET  /api/providers: 支持的 Provider 列表（标识 + 展示名称）
POST /api/providers/test: 验证凭据能否访问后端
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_extraction_service, get_registry
from ..errors import provider_failure_response

router = APIRouter()


class ProviderInfo(BaseModel):
    id: str
    name: str


class ProviderListResponse(BaseModel):
    default: str
    providers: list[ProviderInfo]


class ConnectionTestRequest(BaseModel):
    provider: str | None = Field(default=None, description="Provider 标识，缺省为默认")
    api_key: str | None = Field(default=None, description="待验证的凭据，缺省用已保存凭据")


@router.get("/api/providers", response_model=ProviderListResponse)
async def list_providers(registry=Depends(get_registry)):
    return ProviderListResponse(
        default=str(registry.default_id),
        providers=[
            ProviderInfo(id=provider_id, name=name)
            for provider_id, name in registry.get_supported_providers()
        ],
    )


@router.post("/api/providers/test")
async def test_provider(
    body: ConnectionTestRequest,
    service=Depends(get_extraction_service),
):
    """验证凭据：成功 200，失败按失败分类映射状态码"""
    provider_id, result = await service.test_connection(body.provider, body.api_key)
    if not result.ok:
        return provider_failure_response(result.failure, provider=provider_id)
    return {"ok": True, "provider": provider_id}
