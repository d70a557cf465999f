"""备份导出与对账导入

导入流程：
1. 反序列化备份文档，结构非法直接返回 malformed_backup，不写入任何数据
2. 按 payload 顺序逐条处理候选任务，以 (title, start_time, deadline) 判断是否已存在
3. 不存在则插入任务及其子项，imported_count + 1；已存在则跳过，skipped_count + 1
4. 任意一次插入遇到存储错误即停止并返回 storage_error，已提交的记录不回滚

每条候选任务（连同其子项）单独提交，失败时只回滚当前这一条未提交的写入。
"""

import asyncio
from typing import Any

import aiosqlite
import structlog
from pydantic import ValidationError

from .models import (
    BackupData,
    ReconcileFailure,
    ReconcileFailureKind,
    ReconcileSuccess,
    ReconciliationResult,
    Reminder,
    SubTask,
)
from .store.protocols import TaskStore

log = structlog.get_logger()


class BackupService:
    """备份服务 -- 导出全部任务，按身份元组对账导入"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        task_store: TaskStore,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        """
        Args:
            conn: 数据库连接（用于逐条提交/回滚）
            task_store: 任务存储
            write_lock: 连接共享时的写锁，每条候选任务的写入与提交在锁内完成
        """
        self._conn = conn
        self._task_store = task_store
        self._write_lock = write_lock or asyncio.Lock()

    async def export_backup(self) -> BackupData:
        """导出全部任务及子项"""
        details = await self._task_store.list_all_details()
        backup = BackupData(
            tasks=[d.task for d in details],
            sub_tasks=[s for d in details for s in d.sub_tasks],
            reminders=[r for d in details for r in d.reminders],
        )
        log.info(
            "backup_exported",
            task_count=len(backup.tasks),
            sub_task_count=len(backup.sub_tasks),
            reminder_count=len(backup.reminders),
        )
        return backup

    async def export_backup_json(self) -> str:
        """导出为 JSON 字符串"""
        backup = await self.export_backup()
        return backup.model_dump_json(indent=2)

    async def restore_backup(
        self,
        payload: str | bytes | dict[str, Any],
    ) -> ReconciliationResult:
        """对账导入备份

        Args:
            payload: 备份 JSON 文本或已解码的 dict

        Returns:
            ReconcileSuccess（精确计数）或 ReconcileFailure（单一原因）
        """
        try:
            if isinstance(payload, dict):
                backup = BackupData.model_validate(payload)
            else:
                backup = BackupData.model_validate_json(payload)
        except ValidationError as e:
            log.warning("backup_malformed", error_count=e.error_count())
            return ReconcileFailure(
                kind=ReconcileFailureKind.MALFORMED_BACKUP,
                cause=f"备份数据格式错误: {e.errors()[0]['msg']}",
            )

        sub_tasks_by_task: dict[int, list[SubTask]] = {}
        for sub in backup.sub_tasks:
            if sub.task_id is not None:
                sub_tasks_by_task.setdefault(sub.task_id, []).append(sub)

        reminders_by_task: dict[int, list[Reminder]] = {}
        for reminder in backup.reminders:
            if reminder.task_id is not None:
                reminders_by_task.setdefault(reminder.task_id, []).append(reminder)

        imported_count = 0
        skipped_count = 0

        for candidate in backup.tasks:
            async with self._write_lock:
                try:
                    new_id = await self._task_store.insert_task_if_absent(candidate)
                    if new_id is not None and candidate.id is not None:
                        for sub in sub_tasks_by_task.get(candidate.id, []):
                            await self._task_store.add_sub_task(new_id, sub)
                        for reminder in reminders_by_task.get(candidate.id, []):
                            await self._task_store.add_reminder(new_id, reminder)
                    await self._conn.commit()
                except (aiosqlite.Error, OverflowError) as e:
                    await self._conn.rollback()
                    log.error(
                        "backup_restore_storage_error",
                        title=candidate.title,
                        imported_count=imported_count,
                        skipped_count=skipped_count,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    return ReconcileFailure(
                        kind=ReconcileFailureKind.STORAGE_ERROR,
                        cause=f"导入任务「{candidate.title}」失败: {e}",
                    )

            if new_id is None:
                skipped_count += 1
            else:
                imported_count += 1

        log.info(
            "backup_restored",
            imported_count=imported_count,
            skipped_count=skipped_count,
        )
        return ReconcileSuccess(
            imported_count=imported_count,
            skipped_count=skipped_count,
        )
