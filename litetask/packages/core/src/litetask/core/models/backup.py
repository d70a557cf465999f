"""备份数据模型 + 对账结果

BackupData 是导出与导入共用的 JSON 文档结构。
ReconciliationResult 要么是完整计数的成功，要么是单一原因的失败，不存在半填充状态。
"""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..config import BACKUP_FORMAT_VERSION
from .task import Reminder, SubTask, TaskRecord, now_ms


class BackupData(BaseModel):
    """备份文档

    子项通过导出时的 task id 关联父任务，导入时重新映射到新 id。
    未知顶层字段忽略。
    """

    model_config = ConfigDict(extra="ignore")

    version: int = Field(default=BACKUP_FORMAT_VERSION)
    timestamp: int = Field(default_factory=now_ms)
    tasks: list[TaskRecord] = Field(default_factory=list)
    sub_tasks: list[SubTask] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)


class ReconcileFailureKind(StrEnum):
    """对账失败分类"""

    MALFORMED_BACKUP = "malformed_backup"
    STORAGE_ERROR = "storage_error"


class ReconcileSuccess(BaseModel):
    """对账成功：精确计数"""

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    imported_count: int = Field(ge=0)
    skipped_count: int = Field(ge=0)


class ReconcileFailure(BaseModel):
    """对账失败：单一终止原因

    失败前已提交的插入不回滚。
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    kind: ReconcileFailureKind
    cause: str


ReconciliationResult = Annotated[
    ReconcileSuccess | ReconcileFailure,
    Field(discriminator="status"),
]
