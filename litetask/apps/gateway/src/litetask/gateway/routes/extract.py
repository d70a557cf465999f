"""提取路由

POST /api/extract: 自然语言 -> 任务列表（可选直接入库）
POST /api/tasks/{task_id}/subtasks/generate: 为已有任务生成子任务
"""

from fastapi import APIRouter, Depends
from litetask.core.models import HistorySource
from pydantic import BaseModel, Field

from ..deps import get_extraction_service, get_store_group
from ..errors import provider_failure_response, task_not_found

router = APIRouter()


class ExtractRequest(BaseModel):
    """提取请求体"""

    text: str = Field(description="用户输入文本或语音转写，空文本返回空列表")
    provider: str | None = Field(default=None, description="Provider 标识，缺省为默认")
    source: HistorySource = Field(default=HistorySource.TEXT, description="输入来源")
    api_key: str | None = Field(default=None, description="凭据，缺省用已保存凭据")
    persist: bool = Field(default=False, description="是否直接写入任务存储")


class SubTaskGenerateRequest(BaseModel):
    """子任务生成请求体"""

    context: str = Field(default="", description="用户补充说明")
    provider: str | None = None
    api_key: str | None = None


@router.post("/api/extract")
async def extract_tasks(
    body: ExtractRequest,
    service=Depends(get_extraction_service),
):
    """解析文本为任务

    - 成功返回 200 + tasks（持久化时带 id）
    - Provider 失败按失败分类映射为 4xx/5xx，响应中仍带 history_id
    """
    outcome = await service.extract(
        text=body.text,
        provider_id=body.provider,
        source=body.source,
        credential=body.api_key,
        persist=body.persist,
    )
    if outcome.failure is not None:
        return provider_failure_response(
            outcome.failure,
            provider=outcome.provider,
            history_id=outcome.history_id,
        )
    return {
        "provider": outcome.provider,
        "history_id": outcome.history_id,
        "tasks": [t.model_dump(mode="json") for t in outcome.tasks],
    }


@router.post("/api/tasks/{task_id}/subtasks/generate")
async def generate_subtasks(
    task_id: int,
    body: SubTaskGenerateRequest,
    store_group=Depends(get_store_group),
    service=Depends(get_extraction_service),
):
    task = await store_group.task_store.get_task(task_id)
    if task is None:
        return task_not_found(task_id)

    outcome = await service.generate_subtasks(
        task,
        additional_context=body.context,
        provider_id=body.provider,
        credential=body.api_key,
    )
    if outcome.failure is not None:
        return provider_failure_response(
            outcome.failure,
            provider=outcome.provider,
            history_id=outcome.history_id,
        )
    return {
        "provider": outcome.provider,
        "history_id": outcome.history_id,
        "sub_tasks": [s.model_dump(mode="json") for s in outcome.sub_tasks],
    }
