"""AI 解析历史路由

GET    /api/history: 按时间倒序列出
DELETE /api/history/{history_id}: 删除单条
DELETE /api/history: 清空
"""

from fastapi import APIRouter, Depends

from ..deps import get_store_group
from ..errors import error_response

router = APIRouter()


@router.get("/api/history")
async def list_history(store_group=Depends(get_store_group)):
    entries = await store_group.history_store.list_history()
    return {"history": [e.model_dump(mode="json") for e in entries]}


@router.delete("/api/history/{history_id}")
async def delete_history(history_id: str, store_group=Depends(get_store_group)):
    async with store_group.write_lock:
        deleted = await store_group.history_store.delete(history_id)
        await store_group.conn.commit()
    if not deleted:
        return error_response(
            404,
            "HISTORY_NOT_FOUND",
            f"History entry {history_id} does not exist",
        )
    return {"history_id": history_id, "deleted": True}


@router.delete("/api/history")
async def clear_history(store_group=Depends(get_store_group)):
    async with store_group.write_lock:
        deleted_count = await store_group.history_store.clear()
        await store_group.conn.commit()
    return {"deleted_count": deleted_count}
