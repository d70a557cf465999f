"""Store Protocol 接口定义

定义 TaskStore、HistoryStore、SecretStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
对账引擎与提取服务只依赖这些接口，不依赖具体存储引擎。
"""

from typing import Protocol

from ..models import HistoryEntry, Reminder, SubTask, TaskDetail, TaskRecord


class TaskStore(Protocol):
    """Task 存储接口

    查询方法的排序必须与 litetask.core.queries 完全一致。
    """

    async def create_task(self, task: TaskRecord) -> int:
        """插入任务，返回新 id"""
        ...

    async def insert_task_if_absent(self, task: TaskRecord) -> int | None:
        """身份元组不存在时原子插入，已存在返回 None"""
        ...

    async def add_sub_task(self, task_id: int, sub_task: SubTask) -> int:
        """追加子任务"""
        ...

    async def add_reminder(self, task_id: int, reminder: Reminder) -> int:
        """追加提醒"""
        ...

    async def get_task_detail(self, task_id: int) -> TaskDetail | None:
        """详情视图"""
        ...

    async def list_active_sorted(self) -> list[TaskRecord]:
        """活跃视图"""
        ...

    async def list_urgent(self, now: int, window_ms: int) -> list[TaskRecord]:
        """紧急视图"""
        ...

    async def list_in_range(self, range_start: int, range_end: int) -> list[TaskRecord]:
        """区间视图"""
        ...

    async def list_all_details(self) -> list[TaskDetail]:
        """全部任务及子项"""
        ...


class HistoryStore(Protocol):
    """AI 解析历史存储接口（append-only）"""

    async def append(self, entry: HistoryEntry) -> None:
        """追加历史"""
        ...

    async def list_history(self) -> list[HistoryEntry]:
        """按时间倒序列出"""
        ...

    async def delete(self, history_id: str) -> bool:
        """删除单条"""
        ...

    async def clear(self) -> int:
        """清空"""
        ...


class SecretStore(Protocol):
    """凭据存储接口 -- 不透明的 get/set 字符串存储"""

    def get_secret(self, key: str) -> str | None:
        """读取凭据，不存在返回 None"""
        ...

    def set_secret(self, key: str, value: str) -> None:
        """写入凭据"""
        ...
