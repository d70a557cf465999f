"""ExtractionProvider -- 文本提取能力接口

系统其余部分只依赖此接口，不依赖任何具体后端。
"""

from abc import ABC, abstractmethod

from litetask.core.models import TaskRecord

from .models import ProviderResult


class ExtractionProvider(ABC):
    """提取 Provider 抽象接口"""

    # 为 False 时调用方可传空凭据
    requires_credential: bool = True

    @abstractmethod
    async def parse_tasks_from_text(
        self,
        credential: str,
        text: str,
    ) -> ProviderResult[list[TaskRecord]]:
        """从自然语言文本解析任务

        输入再畸形也不抛异常；只有传输/鉴权/后端错误才返回失败。
        文本不含可执行任务时返回成功 + 空列表。
        """
        ...

    @abstractmethod
    async def generate_subtasks(
        self,
        credential: str,
        task: TaskRecord,
        additional_context: str = "",
    ) -> ProviderResult[list[str]]:
        """将任务拆解为有序的子任务步骤"""
        ...

    @abstractmethod
    async def test_connection(self, credential: str) -> ProviderResult[bool]:
        """验证凭据能否访问后端（不消耗提取额度）"""
        ...

    @abstractmethod
    def get_provider_name(self) -> str:
        """展示名称（纯函数，无 I/O）"""
        ...
