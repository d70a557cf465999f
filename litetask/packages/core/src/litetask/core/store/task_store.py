"""TaskStore SQLite 实现

查询排序严格对齐 litetask.core.queries 的参考实现。
写操作不自动提交事务，由调用方管理。
"""

import aiosqlite

from ..models import Reminder, SubTask, TaskDetail, TaskRecord, now_ms

_TASK_COLUMNS = (
    "id, title, description, start_time, deadline, type, "
    "is_done, is_pinned, original_source_text"
)

_SELECT_TASKS = f"SELECT {_TASK_COLUMNS} FROM tasks"


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    # ---------------- 写入 ----------------

    async def create_task(self, task: TaskRecord) -> int:
        """插入任务记录（忽略传入的 id），返回新 id"""
        cursor = await self._conn.execute(
            """
            INSERT INTO tasks (title, description, start_time, deadline, type,
                               is_done, is_pinned, original_source_text, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            self._task_params(task),
        )
        return cursor.lastrowid

    async def insert_task_if_absent(self, task: TaskRecord) -> int | None:
        """身份元组不存在时插入任务

        检查与插入在同一条 SQL 语句内完成，不与其他写入者竞争。

        Returns:
            新任务 id；身份元组已存在时返回 None
        """
        cursor = await self._conn.execute(
            """
            INSERT INTO tasks (title, description, start_time, deadline, type,
                               is_done, is_pinned, original_source_text, created_at)
            SELECT ?, ?, ?, ?, ?, ?, ?, ?, ?
            WHERE NOT EXISTS (
                SELECT 1 FROM tasks
                WHERE title = ? AND start_time = ? AND deadline = ?
            )
            """,
            (*self._task_params(task), *task.identity),
        )
        if cursor.rowcount == 1:
            return cursor.lastrowid
        return None

    async def add_sub_task(self, task_id: int, sub_task: SubTask) -> int:
        """为任务追加子任务，返回子任务 id"""
        cursor = await self._conn.execute(
            """
            INSERT INTO sub_tasks (task_id, content, is_completed, sort_order)
            VALUES (?, ?, ?, ?)
            """,
            (task_id, sub_task.content, int(sub_task.is_completed), sub_task.sort_order),
        )
        return cursor.lastrowid

    async def add_reminder(self, task_id: int, reminder: Reminder) -> int:
        """为任务追加提醒，返回提醒 id"""
        cursor = await self._conn.execute(
            """
            INSERT INTO reminders (task_id, trigger_at, label, is_fired)
            VALUES (?, ?, ?, ?)
            """,
            (task_id, reminder.trigger_at, reminder.label, int(reminder.is_fired)),
        )
        return cursor.lastrowid

    async def set_done(self, task_id: int, done: bool) -> bool:
        """标记完成/未完成；完成时同时取消置顶"""
        if done:
            sql = "UPDATE tasks SET is_done = 1, is_pinned = 0 WHERE id = ?"
        else:
            sql = "UPDATE tasks SET is_done = 0 WHERE id = ?"
        cursor = await self._conn.execute(sql, (task_id,))
        return cursor.rowcount > 0

    async def set_pinned(self, task_id: int, pinned: bool) -> bool:
        """设置置顶"""
        cursor = await self._conn.execute(
            "UPDATE tasks SET is_pinned = ? WHERE id = ?",
            (int(pinned), task_id),
        )
        return cursor.rowcount > 0

    async def delete_task(self, task_id: int) -> bool:
        """删除任务（子任务与提醒级联删除）"""
        cursor = await self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0

    # ---------------- 查询 ----------------

    async def get_task(self, task_id: int) -> TaskRecord | None:
        """根据 id 查询任务"""
        cursor = await self._conn.execute(f"{_SELECT_TASKS} WHERE id = ?", (task_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def get_task_detail(self, task_id: int) -> TaskDetail | None:
        """详情视图：任务 + 子任务 + 提醒一起取回"""
        task = await self.get_task(task_id)
        if task is None:
            return None
        return TaskDetail(
            task=task,
            sub_tasks=await self._sub_tasks_for(task_id),
            reminders=await self._reminders_for(task_id),
        )

    async def list_active_sorted(self) -> list[TaskRecord]:
        """活跃视图：未完成，置顶优先，其次截止时间升序"""
        return await self._fetch_tasks(
            f"{_SELECT_TASKS} WHERE is_done = 0 "
            "ORDER BY is_pinned DESC, deadline ASC, id ASC",
        )

    async def list_urgent(self, now: int, window_ms: int) -> list[TaskRecord]:
        """紧急视图：未完成且 deadline <= now + window_ms，截止时间升序"""
        return await self._fetch_tasks(
            f"{_SELECT_TASKS} WHERE is_done = 0 AND deadline <= ? "
            "ORDER BY deadline ASC, id ASC",
            (now + window_ms,),
        )

    async def list_in_range(self, range_start: int, range_end: int) -> list[TaskRecord]:
        """区间视图：start_time >= range_start 且 deadline <= range_end"""
        return await self._fetch_tasks(
            f"{_SELECT_TASKS} WHERE start_time >= ? AND deadline <= ? "
            "ORDER BY deadline ASC, id ASC",
            (range_start, range_end),
        )

    async def list_all_tasks(self) -> list[TaskRecord]:
        """全部任务，按 id 升序"""
        return await self._fetch_tasks(f"{_SELECT_TASKS} ORDER BY id ASC")

    async def list_all_details(self) -> list[TaskDetail]:
        """全部任务及其子项（导出备份用）"""
        tasks = await self.list_all_tasks()

        sub_tasks: dict[int, list[SubTask]] = {}
        cursor = await self._conn.execute(
            "SELECT id, task_id, content, is_completed, sort_order FROM sub_tasks "
            "ORDER BY task_id, sort_order, id"
        )
        for row in await cursor.fetchall():
            sub = self._row_to_sub_task(row)
            sub_tasks.setdefault(sub.task_id, []).append(sub)

        reminders: dict[int, list[Reminder]] = {}
        cursor = await self._conn.execute(
            "SELECT id, task_id, trigger_at, label, is_fired FROM reminders "
            "ORDER BY task_id, trigger_at, id"
        )
        for row in await cursor.fetchall():
            reminder = self._row_to_reminder(row)
            reminders.setdefault(reminder.task_id, []).append(reminder)

        return [
            TaskDetail(
                task=t,
                sub_tasks=sub_tasks.get(t.id, []),
                reminders=reminders.get(t.id, []),
            )
            for t in tasks
        ]

    async def count_tasks(self) -> int:
        cursor = await self._conn.execute("SELECT COUNT(*) FROM tasks")
        row = await cursor.fetchone()
        return row[0]

    # ---------------- 内部工具 ----------------

    async def _fetch_tasks(self, sql: str, params: tuple = ()) -> list[TaskRecord]:
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def _sub_tasks_for(self, task_id: int) -> list[SubTask]:
        cursor = await self._conn.execute(
            "SELECT id, task_id, content, is_completed, sort_order FROM sub_tasks "
            "WHERE task_id = ? ORDER BY sort_order, id",
            (task_id,),
        )
        return [self._row_to_sub_task(row) for row in await cursor.fetchall()]

    async def _reminders_for(self, task_id: int) -> list[Reminder]:
        cursor = await self._conn.execute(
            "SELECT id, task_id, trigger_at, label, is_fired FROM reminders "
            "WHERE task_id = ? ORDER BY trigger_at, id",
            (task_id,),
        )
        return [self._row_to_reminder(row) for row in await cursor.fetchall()]

    @staticmethod
    def _task_params(task: TaskRecord) -> tuple:
        return (
            task.title,
            task.description,
            task.start_time,
            task.deadline,
            task.type.value,
            int(task.is_done),
            int(task.is_pinned),
            task.original_source_text,
            now_ms(),
        )

    @staticmethod
    def _row_to_task(row) -> TaskRecord:
        """将数据库行转换为 TaskRecord 模型"""
        return TaskRecord(
            id=row[0],
            title=row[1],
            description=row[2],
            start_time=row[3],
            deadline=row[4],
            type=row[5],
            is_done=bool(row[6]),
            is_pinned=bool(row[7]),
            original_source_text=row[8],
        )

    @staticmethod
    def _row_to_sub_task(row) -> SubTask:
        return SubTask(
            id=row[0],
            task_id=row[1],
            content=row[2],
            is_completed=bool(row[3]),
            sort_order=row[4],
        )

    @staticmethod
    def _row_to_reminder(row) -> Reminder:
        return Reminder(
            id=row[0],
            task_id=row[1],
            trigger_at=row[2],
            label=row[3],
            is_fired=bool(row[4]),
        )
