"""设置路由

PUT /api/settings/api-key: 保存后端凭据（空串清除）
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_secret_store
from ..services.secret_store import API_KEY_SECRET

log = structlog.get_logger()

router = APIRouter()


class ApiKeyRequest(BaseModel):
    api_key: str


@router.put("/api/settings/api-key")
async def set_api_key(body: ApiKeyRequest, secret_store=Depends(get_secret_store)):
    secret_store.set_secret(API_KEY_SECRET, body.api_key.strip())
    configured = secret_store.get_secret(API_KEY_SECRET) is not None
    log.info("api_key_updated", configured=configured)
    return {"configured": configured}
