"""LiteTask Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .backup import (
    BackupData,
    ReconcileFailure,
    ReconcileFailureKind,
    ReconcileSuccess,
    ReconciliationResult,
)
from .enums import HistorySource, TaskType, coerce_task_type
from .history import HistoryEntry
from .task import Reminder, SqliteInt, SubTask, TaskDetail, TaskRecord, now_ms

__all__ = [
    # 枚举
    "TaskType",
    "HistorySource",
    "coerce_task_type",
    # Task
    "TaskRecord",
    "SubTask",
    "Reminder",
    "TaskDetail",
    "now_ms",
    "SqliteInt",
    # History
    "HistoryEntry",
    # Backup
    "BackupData",
    "ReconcileSuccess",
    "ReconcileFailure",
    "ReconcileFailureKind",
    "ReconciliationResult",
]
