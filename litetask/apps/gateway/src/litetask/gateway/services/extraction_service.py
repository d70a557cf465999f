"""ExtractionService -- 提取/子任务拆解业务逻辑

提取流程：
1. 通过 ProviderRegistry 解析 Provider（未知标识回退到默认）
2. 调用方未传凭据时读取已保存的凭据；都没有则直接返回 credential_missing，不发起网络请求
3. 调用 Provider 并写入一条 HistoryEntry（成功或失败都记录）
4. persist=True 时将解析出的任务写入存储，与历史记录同一次提交
"""

import structlog
from litetask.core.models import HistoryEntry, HistorySource, SubTask, TaskRecord
from litetask.core.store import StoreGroup
from litetask.core.store.protocols import SecretStore
from litetask.provider import (
    CredentialMissingError,
    ExtractionProvider,
    ProviderFailure,
    ProviderRegistry,
    ProviderResult,
)
from pydantic import BaseModel, Field

from .secret_store import API_KEY_SECRET

log = structlog.get_logger()


class ExtractionOutcome(BaseModel):
    """一次提取调用的结果"""

    provider: str = Field(description="实际使用的 Provider 标识")
    history_id: str = Field(description="对应的历史记录 ID")
    tasks: list[TaskRecord] = Field(default_factory=list)
    failure: ProviderFailure | None = None


class SubTaskOutcome(BaseModel):
    """一次子任务拆解的结果"""

    provider: str
    history_id: str
    sub_tasks: list[SubTask] = Field(default_factory=list)
    failure: ProviderFailure | None = None


class ExtractionService:
    """提取业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        registry: ProviderRegistry,
        secret_store: SecretStore,
    ) -> None:
        self._stores = store_group
        self._registry = registry
        self._secrets = secret_store

    def _resolve_credential(
        self,
        provider: ExtractionProvider,
        credential: str | None,
    ) -> str | None:
        """调用方凭据优先，其次已保存凭据；Provider 不需要凭据时返回空串"""
        if credential and credential.strip():
            return credential.strip()
        stored = self._secrets.get_secret(API_KEY_SECRET)
        if stored:
            return stored
        if not provider.requires_credential:
            return ""
        return None

    async def extract(
        self,
        text: str,
        provider_id: str | None = None,
        source: HistorySource = HistorySource.TEXT,
        credential: str | None = None,
        persist: bool = False,
    ) -> ExtractionOutcome:
        """从文本提取任务

        Args:
            text: 用户输入（文本或语音转写）
            provider_id: Provider 标识，None/未知时使用默认
            source: 历史记录来源
            credential: 调用方提供的凭据，为空时读取已保存凭据
            persist: 是否写入任务存储
        """
        resolved_id = self._registry.resolve_id(provider_id)
        provider = self._registry.get_provider(resolved_id)

        key = self._resolve_credential(provider, credential)
        if not text.strip():
            # 空输入没有可提取的任务，无需凭据
            result = ProviderResult[list[TaskRecord]].success([])
        elif key is None:
            result = ProviderResult[list[TaskRecord]].fail(CredentialMissingError())
        else:
            result = await provider.parse_tasks_from_text(key, text)

        tasks = result.value or []
        entry = HistoryEntry(
            source=source,
            content=text,
            is_success=result.ok,
            parsed_count=len(tasks),
        )

        async with self._stores.write_lock:
            try:
                await self._stores.history_store.append(entry)
                if result.ok and persist:
                    persisted = []
                    for task in tasks:
                        task_id = await self._stores.task_store.create_task(task)
                        persisted.append(task.model_copy(update={"id": task_id}))
                    tasks = persisted
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise

        if result.ok:
            log.info(
                "extraction_completed",
                provider=str(resolved_id),
                task_count=len(tasks),
                persisted=persist,
                history_id=entry.history_id,
            )
        else:
            log.warning(
                "extraction_failed",
                provider=str(resolved_id),
                failure_kind=str(result.failure.kind),
                status_code=result.failure.status_code,
                history_id=entry.history_id,
            )

        return ExtractionOutcome(
            provider=str(resolved_id),
            history_id=entry.history_id,
            tasks=tasks,
            failure=result.failure,
        )

    async def generate_subtasks(
        self,
        task: TaskRecord,
        additional_context: str = "",
        provider_id: str | None = None,
        credential: str | None = None,
    ) -> SubTaskOutcome:
        """为已入库任务生成子任务并追加到该任务下"""
        resolved_id = self._registry.resolve_id(provider_id)
        provider = self._registry.get_provider(resolved_id)

        key = self._resolve_credential(provider, credential)
        if key is None:
            result = ProviderResult[list[str]].fail(CredentialMissingError())
        else:
            result = await provider.generate_subtasks(key, task, additional_context)

        steps = result.value or []
        prompt = f"{task.title} {additional_context}".strip()
        entry = HistoryEntry(
            source=HistorySource.SUBTASK,
            content=prompt,
            is_success=result.ok,
            parsed_count=len(steps),
        )

        sub_tasks: list[SubTask] = []
        async with self._stores.write_lock:
            try:
                await self._stores.history_store.append(entry)
                if result.ok and task.id is not None:
                    detail = await self._stores.task_store.get_task_detail(task.id)
                    offset = len(detail.sub_tasks) if detail else 0
                    for index, content in enumerate(steps):
                        sub = SubTask(task_id=task.id, content=content, sort_order=offset + index)
                        sub_id = await self._stores.task_store.add_sub_task(task.id, sub)
                        sub_tasks.append(sub.model_copy(update={"id": sub_id}))
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise

        log.info(
            "subtask_generation_finished",
            provider=str(resolved_id),
            task_id=task.id,
            success=result.ok,
            step_count=len(sub_tasks),
        )
        return SubTaskOutcome(
            provider=str(resolved_id),
            history_id=entry.history_id,
            sub_tasks=sub_tasks,
            failure=result.failure,
        )

    async def test_connection(
        self,
        provider_id: str | None = None,
        credential: str | None = None,
    ) -> tuple[str, ProviderResult[bool]]:
        """验证凭据，返回 (实际 Provider 标识, 结果)"""
        resolved_id = self._registry.resolve_id(provider_id)
        provider = self._registry.get_provider(resolved_id)

        key = self._resolve_credential(provider, credential)
        if key is None:
            return str(resolved_id), ProviderResult[bool].fail(CredentialMissingError())
        return str(resolved_id), await provider.test_connection(key)
