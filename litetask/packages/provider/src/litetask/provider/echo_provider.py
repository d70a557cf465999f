"""EchoProvider -- 离线回声 Provider

不访问网络、不需要凭据：输入的每个非空行回显为一条任务。
用于开发调试、集成测试以及未配置后端时的本地体验。
"""

import re
from collections.abc import Callable
from datetime import datetime

from litetask.core.config import DAY_MS
from litetask.core.models import TaskRecord

from .base import ExtractionProvider
from .models import ProviderResult

PROVIDER_NAME = "Echo (offline)"

_STEP_SPLIT_RE = re.compile(r"[\n；;。，,]+")


class EchoProvider(ExtractionProvider):
    """离线回声 Provider"""

    requires_credential = False

    def __init__(self, now_fn: Callable[[], datetime] = datetime.now) -> None:
        self._now_fn = now_fn

    def get_provider_name(self) -> str:
        return PROVIDER_NAME

    async def parse_tasks_from_text(
        self,
        credential: str,
        text: str,
    ) -> ProviderResult[list[TaskRecord]]:
        """每个非空行 -> 一条任务，start=now，deadline=now+24h"""
        now_ms = int(self._now_fn().timestamp() * 1000)
        tasks = [
            TaskRecord(
                title=line.strip(),
                start_time=now_ms,
                deadline=now_ms + DAY_MS,
                original_source_text=text,
            )
            for line in text.splitlines()
            if line.strip()
        ]
        return ProviderResult[list[TaskRecord]].success(tasks)

    async def generate_subtasks(
        self,
        credential: str,
        task: TaskRecord,
        additional_context: str = "",
    ) -> ProviderResult[list[str]]:
        """按标点切分补充说明（或描述）作为步骤，都为空时回显标题"""
        source = additional_context.strip() or task.description
        steps = [part.strip() for part in _STEP_SPLIT_RE.split(source) if part.strip()]
        return ProviderResult[list[str]].success(steps or [task.title])

    async def test_connection(self, credential: str) -> ProviderResult[bool]:
        return ProviderResult[bool].success(True)
