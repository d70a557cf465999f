"""DeepSeekProvider -- OpenAI 兼容 chat/completions 后端

通过 httpx 直接调用后端：
- parse_tasks_from_text: POST {base_url}/chat/completions，解析模型回复为任务列表
- test_connection: GET {base_url}/models，只验证凭据，不消耗提取额度
- generate_subtasks: 复用同一 chat 交换，将任务拆解为步骤列表

所有公开方法都不抛异常，失败统一以 ProviderResult.fail 返回。
凭据只出现在 Authorization 头中，不写入日志。
"""

import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

import httpx
import structlog
from litetask.core.models import TaskRecord

from .base import ExtractionProvider
from .config import ProviderConfig
from .exceptions import (
    CredentialMissingError,
    FailureKind,
    ProviderError,
    ProviderHTTPError,
    ProviderUnreachableError,
)
from .models import ProviderResult
from .parsing import parse_subtask_content, parse_tasks_content
from .prompts import build_extraction_prompt, build_subtask_prompt

log = structlog.get_logger()

PROVIDER_NAME = "DeepSeek V3.2"


class DeepSeekProvider(ExtractionProvider):
    """DeepSeek 提取 Provider"""

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        now_fn: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Args:
            config: 后端配置，None 时使用默认值
            transport: 自定义 httpx 传输层（测试时注入 MockTransport）
            now_fn: 当前本地时间来源，用于提示词和字段默认值
        """
        self._config = config or ProviderConfig()
        self._base_url = self._config.base_url.rstrip("/")
        self._transport = transport
        self._now_fn = now_fn

    def get_provider_name(self) -> str:
        return PROVIDER_NAME

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout_s),
            transport=self._transport,
        )

    @staticmethod
    def _headers(credential: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }

    async def _chat(self, credential: str, system_prompt: str, user_text: str) -> str:
        """执行一次 chat/completions 交换，返回 choices[0].message.content

        Raises:
            CredentialMissingError: 凭据为空
            ProviderUnreachableError: 连接失败/超时/DNS 失败
            ProviderHTTPError: 非 2xx 状态码
            ProviderError: 响应体为空或信封结构不合法
        """
        if not credential or not credential.strip():
            raise CredentialMissingError()

        url = f"{self._base_url}/chat/completions"
        body = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }

        start_time = time.monotonic()
        log.debug("chat_call_start", model=self._config.model, text_length=len(user_text))
        try:
            async with self._client() as client:
                resp = await client.post(url, json=body, headers=self._headers(credential))
        except httpx.HTTPError as e:
            log.warning("chat_call_unreachable", url=url, error_type=type(e).__name__)
            raise ProviderUnreachableError(url, e) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if not resp.is_success:
            log.warning(
                "chat_call_failed",
                status_code=resp.status_code,
                duration_ms=duration_ms,
            )
            raise ProviderHTTPError(resp.status_code, resp.text)

        if not resp.content.strip():
            raise ProviderError("响应为空", kind=FailureKind.EMPTY_RESPONSE)

        content = self._extract_content(resp)
        log.info(
            "chat_call_completed",
            model=self._config.model,
            duration_ms=duration_ms,
            content_length=len(content),
        )
        return content

    @staticmethod
    def _extract_content(resp: httpx.Response) -> str:
        """从响应信封中取出 choices[0].message.content"""
        try:
            envelope: Any = resp.json()
            content = envelope["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                f"响应格式错误: {e}",
                kind=FailureKind.MALFORMED_ENVELOPE,
            ) from e
        if content is None:
            return ""
        if not isinstance(content, str):
            raise ProviderError(
                "响应格式错误: content 不是字符串",
                kind=FailureKind.MALFORMED_ENVELOPE,
            )
        return content

    async def parse_tasks_from_text(
        self,
        credential: str,
        text: str,
    ) -> ProviderResult[list[TaskRecord]]:
        if not text.strip():
            return ProviderResult[list[TaskRecord]].success([])

        now = self._now_fn()
        now_ms = int(now.timestamp() * 1000)
        try:
            content = await self._chat(credential, build_extraction_prompt(now), text)
        except ProviderError as e:
            return ProviderResult[list[TaskRecord]].fail(e)

        tasks = parse_tasks_content(content, text, now_ms)
        log.info("tasks_parsed", task_count=len(tasks))
        return ProviderResult[list[TaskRecord]].success(tasks)

    async def generate_subtasks(
        self,
        credential: str,
        task: TaskRecord,
        additional_context: str = "",
    ) -> ProviderResult[list[str]]:
        """将任务拆解为有序的子任务步骤"""
        prompt = build_subtask_prompt(self._now_fn(), task, additional_context)
        try:
            content = await self._chat(credential, prompt, f"请拆解任务：{task.title}")
        except ProviderError as e:
            return ProviderResult[list[str]].fail(e)

        steps = parse_subtask_content(content)
        log.info("subtasks_generated", step_count=len(steps))
        return ProviderResult[list[str]].success(steps)

    async def test_connection(self, credential: str) -> ProviderResult[bool]:
        if not credential or not credential.strip():
            return ProviderResult[bool].fail(CredentialMissingError())

        url = f"{self._base_url}/models"
        try:
            async with self._client() as client:
                resp = await client.get(url, headers=self._headers(credential))
        except httpx.HTTPError as e:
            log.debug("connection_test_unreachable", url=url, error_type=type(e).__name__)
            return ProviderResult[bool].fail(ProviderUnreachableError(url, e))

        if not resp.is_success:
            log.debug("connection_test_failed", status_code=resp.status_code)
            # 连接测试只给出分类文案，不带响应体
            return ProviderResult[bool].fail(ProviderHTTPError(resp.status_code))

        log.info("connection_test_passed")
        return ProviderResult[bool].success(True)
