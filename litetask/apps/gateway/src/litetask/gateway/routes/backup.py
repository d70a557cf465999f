"""备份路由

GET  /api/backup/export: 导出全部任务为备份文档
POST /api/backup/import: 对账导入（请求体为备份 JSON 原文）
"""

from fastapi import APIRouter, Depends, Request
from litetask.core.backup import BackupService
from litetask.core.models import ReconcileFailure, ReconcileFailureKind
from starlette.responses import JSONResponse

from ..deps import get_store_group
from ..errors import error_response

router = APIRouter()


@router.get("/api/backup/export")
async def export_backup(store_group=Depends(get_store_group)):
    service = BackupService(store_group.conn, store_group.task_store, store_group.write_lock)
    backup = await service.export_backup()
    return JSONResponse(
        content=backup.model_dump(mode="json"),
        headers={
            "Content-Disposition": (
                f'attachment; filename="litetask-backup-{backup.timestamp}.json"'
            ),
        },
    )


@router.post("/api/backup/import")
async def import_backup(request: Request, store_group=Depends(get_store_group)):
    """对账导入

    - 成功返回 200 + imported_count / skipped_count
    - 备份格式错误返回 400，存储错误返回 500
    """
    payload = await request.body()
    service = BackupService(store_group.conn, store_group.task_store, store_group.write_lock)
    result = await service.restore_backup(payload)

    if isinstance(result, ReconcileFailure):
        status_code = 400 if result.kind == ReconcileFailureKind.MALFORMED_BACKUP else 500
        return error_response(status_code, result.kind.value.upper(), result.cause)
    return result.model_dump(mode="json")
