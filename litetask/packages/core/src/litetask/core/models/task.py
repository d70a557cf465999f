"""Task Domain Model

TaskRecord 是提取、对账与查询共用的规范任务结构。
时间字段统一为毫秒时间戳；身份元组 (title, start_time, deadline) 用于备份去重。
"""

import time
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import TaskType

# SQLite INTEGER 为 64 位有符号整数
SqliteInt = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]


def now_ms() -> int:
    """当前时间（毫秒时间戳）"""
    return int(time.time() * 1000)


class TaskRecord(BaseModel):
    """任务记录"""

    id: SqliteInt | None = Field(default=None, description="存储层主键，未入库时为 None")
    title: str = Field(min_length=1, description="任务标题")
    description: str = Field(default="", description="任务描述，缺省为空串而非 None")
    start_time: SqliteInt = Field(default_factory=now_ms, description="开始时间（毫秒）")
    deadline: SqliteInt = Field(description="截止时间（毫秒），必填")
    type: TaskType = Field(default=TaskType.WORK, description="任务分类")
    is_done: bool = Field(default=False, description="是否完成")
    is_pinned: bool = Field(default=False, description="是否置顶")
    original_source_text: str | None = Field(
        default=None,
        description="产生该记录的原始输入文本（审计用）",
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("description", mode="before")
    @classmethod
    def description_never_none(cls, v: object) -> object:
        return "" if v is None else v

    @property
    def identity(self) -> tuple[str, int, int]:
        """对账身份元组 (title, start_time, deadline)"""
        return (self.title, self.start_time, self.deadline)


class SubTask(BaseModel):
    """子任务（依附于 TaskRecord，按 task_id 外键组合）"""

    id: SqliteInt | None = None
    task_id: SqliteInt | None = None
    content: str
    is_completed: bool = False
    sort_order: SqliteInt = 0


class Reminder(BaseModel):
    """提醒（依附于 TaskRecord）"""

    id: SqliteInt | None = None
    task_id: SqliteInt | None = None
    trigger_at: SqliteInt = Field(description="触发时间（毫秒）")
    label: str | None = None
    is_fired: bool = False


class TaskDetail(BaseModel):
    """详情视图：任务 + 全部子项"""

    model_config = ConfigDict(frozen=True)

    task: TaskRecord
    sub_tasks: list[SubTask] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
