"""任务路由

GET    /api/tasks/active: 活跃视图（置顶优先，截止时间升序）
GET    /api/tasks/urgent: 紧急视图（window_hours 内到期的未完成任务）
GET    /api/tasks/range: 区间视图
GET    /api/tasks/{task_id}: 详情视图（含子任务与提醒）
POST   /api/tasks: 手动创建任务
PATCH  /api/tasks/{task_id}: 修改完成/置顶标记
DELETE /api/tasks/{task_id}: 删除任务（子项级联删除）
"""

from fastapi import APIRouter, Depends, Query
from litetask.core.config import HOUR_MS, get_urgent_window_ms
from litetask.core.models import SqliteInt, TaskRecord, TaskType, now_ms
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_store_group
from ..errors import error_response, task_not_found

router = APIRouter()


class TaskCreateRequest(BaseModel):
    """手动创建任务请求体"""

    title: str = Field(min_length=1, pattern=r"\S")
    description: str = ""
    start_time: SqliteInt | None = Field(
        default=None,
        description="开始时间（毫秒），缺省为当前时间",
    )
    deadline: SqliteInt = Field(description="截止时间（毫秒）")
    type: TaskType = TaskType.WORK
    is_pinned: bool = False


class TaskPatchRequest(BaseModel):
    """任务标记修改请求体，未提供的字段保持不变"""

    is_done: bool | None = None
    is_pinned: bool | None = None


def _tasks_payload(tasks: list[TaskRecord]) -> dict:
    return {"tasks": [t.model_dump(mode="json") for t in tasks]}


@router.get("/api/tasks/active")
async def list_active(store_group=Depends(get_store_group)):
    tasks = await store_group.task_store.list_active_sorted()
    return _tasks_payload(tasks)


@router.get("/api/tasks/urgent")
async def list_urgent(
    window_hours: int | None = Query(default=None, gt=0, description="紧急窗口（小时）"),
    store_group=Depends(get_store_group),
):
    """查询紧急任务，窗口缺省取 LITETASK_URGENT_WINDOW_HOURS"""
    window_ms = window_hours * HOUR_MS if window_hours else get_urgent_window_ms()
    tasks = await store_group.task_store.list_urgent(now_ms(), window_ms)
    return _tasks_payload(tasks)


@router.get("/api/tasks/range")
async def list_range(
    start: int = Query(description="区间起点（毫秒）"),
    end: int = Query(description="区间终点（毫秒）"),
    store_group=Depends(get_store_group),
):
    if start > end:
        return error_response(400, "INVALID_RANGE", "start must not be after end")
    tasks = await store_group.task_store.list_in_range(start, end)
    return _tasks_payload(tasks)


@router.get("/api/tasks/{task_id}")
async def get_task_detail(task_id: int, store_group=Depends(get_store_group)):
    detail = await store_group.task_store.get_task_detail(task_id)
    if detail is None:
        return task_not_found(task_id)
    return detail.model_dump(mode="json")


@router.post("/api/tasks")
async def create_task(body: TaskCreateRequest, store_group=Depends(get_store_group)):
    """手动创建任务，返回 201 + 任务"""
    task = TaskRecord(
        title=body.title,
        description=body.description,
        start_time=body.start_time if body.start_time is not None else now_ms(),
        deadline=body.deadline,
        type=body.type,
        is_pinned=body.is_pinned,
    )
    async with store_group.write_lock:
        task_id = await store_group.task_store.create_task(task)
        await store_group.conn.commit()
    created = await store_group.task_store.get_task(task_id)
    return JSONResponse(status_code=201, content=created.model_dump(mode="json"))


@router.patch("/api/tasks/{task_id}")
async def patch_task(
    task_id: int,
    body: TaskPatchRequest,
    store_group=Depends(get_store_group),
):
    store = store_group.task_store
    if await store.get_task(task_id) is None:
        return task_not_found(task_id)

    async with store_group.write_lock:
        if body.is_pinned is not None:
            await store.set_pinned(task_id, body.is_pinned)
        # 完成标记最后写入：完成时取消置顶
        if body.is_done is not None:
            await store.set_done(task_id, body.is_done)
        await store_group.conn.commit()

    task = await store.get_task(task_id)
    return task.model_dump(mode="json")


@router.delete("/api/tasks/{task_id}")
async def delete_task(task_id: int, store_group=Depends(get_store_group)):
    async with store_group.write_lock:
        deleted = await store_group.task_store.delete_task(task_id)
        await store_group.conn.commit()
    if not deleted:
        return task_not_found(task_id)
    return {"task_id": task_id, "deleted": True}
