"""BackupService 对账测试

测试内容：
1. 导出 -> 导入同一库：全部跳过
2. 一条重复 + 一条新任务：新增 1 跳过 1，子项重新关联到新 id
3. 格式错误：返回 malformed_backup，不写入任何数据
4. 存储错误：已提交的记录保留，返回 storage_error
"""

import json
from unittest.mock import AsyncMock

import aiosqlite
import pytest
from litetask.core.backup import BackupService
from litetask.core.config import DAY_MS
from litetask.core.models import (
    BackupData,
    ReconcileFailure,
    ReconcileFailureKind,
    ReconcileSuccess,
    Reminder,
    SubTask,
    TaskRecord,
)
from litetask.core.store import StoreGroup

NOW = 1_700_000_000_000


async def _seed(store_group: StoreGroup) -> None:
    store = store_group.task_store
    first = await store.create_task(
        TaskRecord(title="交报告", start_time=NOW, deadline=NOW + DAY_MS)
    )
    await store.add_sub_task(first, SubTask(content="整理数据", sort_order=0))
    await store.add_reminder(first, Reminder(trigger_at=NOW + DAY_MS - 3_600_000))
    await store.create_task(
        TaskRecord(title="买菜", start_time=NOW, deadline=NOW + 2 * DAY_MS, type="LIFE")
    )
    await store_group.conn.commit()


def _service(store_group: StoreGroup) -> BackupService:
    return BackupService(store_group.conn, store_group.task_store)


class TestExport:
    async def test_export_contains_all(self, store_group: StoreGroup):
        await _seed(store_group)
        backup = await _service(store_group).export_backup()

        assert backup.version == 1
        assert [t.title for t in backup.tasks] == ["交报告", "买菜"]
        assert len(backup.sub_tasks) == 1
        assert backup.sub_tasks[0].task_id == backup.tasks[0].id
        assert len(backup.reminders) == 1

    async def test_export_json_is_parseable(self, store_group: StoreGroup):
        await _seed(store_group)
        raw = await _service(store_group).export_backup_json()
        data = json.loads(raw)
        assert set(data) >= {"version", "timestamp", "tasks", "sub_tasks", "reminders"}


class TestRestore:
    async def test_round_trip_skips_everything(self, store_group: StoreGroup):
        await _seed(store_group)
        service = _service(store_group)
        raw = await service.export_backup_json()

        result = await service.restore_backup(raw)

        assert isinstance(result, ReconcileSuccess)
        assert result.imported_count == 0
        assert result.skipped_count == 2
        assert await store_group.task_store.count_tasks() == 2

    async def test_one_duplicate_one_new(self, store_group: StoreGroup):
        await _seed(store_group)
        payload = {
            "version": 1,
            "timestamp": NOW,
            "tasks": [
                {"id": 10, "title": "交报告", "start_time": NOW, "deadline": NOW + DAY_MS},
                {"id": 11, "title": "体检", "start_time": NOW, "deadline": NOW + 3 * DAY_MS},
            ],
            "sub_tasks": [
                {"task_id": 10, "content": "不应导入"},
                {"task_id": 11, "content": "空腹", "sort_order": 0},
                {"task_id": 11, "content": "带身份证", "sort_order": 1},
            ],
            "reminders": [{"task_id": 11, "trigger_at": NOW + DAY_MS}],
        }

        result = await _service(store_group).restore_backup(payload)

        assert result == ReconcileSuccess(imported_count=1, skipped_count=1)
        store = store_group.task_store
        assert await store.count_tasks() == 3

        imported = [d for d in await store.list_all_details() if d.task.title == "体检"][0]
        assert imported.task.id != 11
        assert [s.content for s in imported.sub_tasks] == ["空腹", "带身份证"]
        assert len(imported.reminders) == 1

        existing = [d for d in await store.list_all_details() if d.task.title == "交报告"][0]
        assert [s.content for s in existing.sub_tasks] == ["整理数据"]

    async def test_identical_candidates_in_one_payload(self, store_group: StoreGroup):
        task = {"title": "跑步", "start_time": NOW, "deadline": NOW + DAY_MS}
        result = await _service(store_group).restore_backup({"tasks": [task, task]})
        assert result == ReconcileSuccess(imported_count=1, skipped_count=1)

    async def test_empty_backup(self, store_group: StoreGroup):
        result = await _service(store_group).restore_backup(BackupData().model_dump_json())
        assert result == ReconcileSuccess(imported_count=0, skipped_count=0)

    async def test_malformed_json(self, store_group: StoreGroup):
        await _seed(store_group)
        result = await _service(store_group).restore_backup("{not json")

        assert isinstance(result, ReconcileFailure)
        assert result.kind == ReconcileFailureKind.MALFORMED_BACKUP
        assert await store_group.task_store.count_tasks() == 2

    async def test_malformed_task_writes_nothing(self, store_group: StoreGroup):
        payload = {
            "tasks": [
                {"title": "合法", "start_time": NOW, "deadline": NOW + DAY_MS},
                {"title": "缺少截止时间", "start_time": NOW},
            ]
        }
        result = await _service(store_group).restore_backup(payload)

        assert isinstance(result, ReconcileFailure)
        assert result.kind == ReconcileFailureKind.MALFORMED_BACKUP
        assert await store_group.task_store.count_tasks() == 0

    async def test_storage_error_keeps_committed(self, store_group: StoreGroup):
        store = store_group.task_store
        real_insert = store.insert_task_if_absent
        calls = 0

        async def flaky_insert(task: TaskRecord):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise aiosqlite.OperationalError("database is locked")
            return await real_insert(task)

        store.insert_task_if_absent = AsyncMock(side_effect=flaky_insert)
        payload = {
            "tasks": [
                {"title": f"任务{i}", "start_time": NOW, "deadline": NOW + DAY_MS}
                for i in range(3)
            ]
        }

        result = await _service(store_group).restore_backup(payload)

        assert isinstance(result, ReconcileFailure)
        assert result.kind == ReconcileFailureKind.STORAGE_ERROR
        assert "任务1" in result.cause
        titles = [t.title for t in await store.list_all_tasks()]
        assert titles == ["任务0"]

    @pytest.mark.parametrize(
        "extra",
        [
            {"tasks": [{"title": "越界", "start_time": NOW, "deadline": 10**20}]},
            {"tasks": [{"title": "越界", "start_time": -(10**20), "deadline": NOW}]},
            {"reminders": [{"task_id": 1, "trigger_at": 10**20}]},
            {"sub_tasks": [{"task_id": 1, "content": "x", "sort_order": 2**63}]},
        ],
    )
    async def test_out_of_range_integer_is_malformed(self, store_group: StoreGroup, extra):
        payload = {
            "tasks": [{"id": 1, "title": "合法", "start_time": NOW, "deadline": NOW + DAY_MS}],
        }
        for key, items in extra.items():
            payload[key] = payload.get(key, []) + items

        result = await _service(store_group).restore_backup(json.dumps(payload))

        assert isinstance(result, ReconcileFailure)
        assert result.kind == ReconcileFailureKind.MALFORMED_BACKUP
        assert await store_group.task_store.count_tasks() == 0

    async def test_overflow_during_insert_is_storage_error(self, store_group: StoreGroup):
        store = store_group.task_store
        real_insert = store.insert_task_if_absent
        calls = 0

        async def overflowing_insert(task: TaskRecord):
            nonlocal calls
            calls += 1
            if calls == 2:
                await real_insert(task)
                raise OverflowError("Python int too large to convert to SQLite INTEGER")
            return await real_insert(task)

        store.insert_task_if_absent = AsyncMock(side_effect=overflowing_insert)
        payload = {
            "tasks": [
                {"title": f"任务{i}", "start_time": NOW, "deadline": NOW + DAY_MS}
                for i in range(2)
            ]
        }

        result = await _service(store_group).restore_backup(payload)

        assert isinstance(result, ReconcileFailure)
        assert result.kind == ReconcileFailureKind.STORAGE_ERROR
        # 失败的候选任务未提交的写入被回滚
        assert [t.title for t in await store.list_all_tasks()] == ["任务0"]
