"""HistoryEntry -- 单次 AI 解析的审计记录

每次提取调用写入一条，不可修改，仅支持单条或批量删除。
"""

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

from .enums import HistorySource
from .task import now_ms


class HistoryEntry(BaseModel):
    """AI 解析历史"""

    model_config = ConfigDict(frozen=True)

    history_id: str = Field(
        default_factory=lambda: str(ULID()),
        description="唯一标识，ULID 格式，时间有序",
    )
    source: HistorySource = Field(description="来源：VOICE / TEXT / SUBTASK")
    content: str = Field(description="原始输入（提示词或语音转写）")
    is_success: bool = Field(default=True, description="是否执行成功")
    parsed_count: int = Field(default=0, ge=0, description="解析出的记录数")
    timestamp: int = Field(default_factory=now_ms, description="创建时间（毫秒）")
