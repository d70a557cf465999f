"""Provider 包测试 fixtures"""

import json
from collections.abc import Callable
from datetime import datetime

import httpx
import pytest

# 固定"当前时间"，保证提示词与默认值可断言
FIXED_NOW = datetime(2025, 1, 15, 10, 0)


def ms(value: datetime) -> int:
    """本地时间 -> 毫秒时间戳（与解析逻辑一致）"""
    return int(value.timestamp() * 1000)


def chat_envelope(content: str | None) -> dict:
    """构造 OpenAI 兼容的 chat/completions 响应信封"""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": "deepseek-chat",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class RecordingHandler:
    """MockTransport 处理器：记录请求并返回预设响应"""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self._responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def model_reply() -> Callable[[str | None], RecordingHandler]:
    """返回一个工厂：给定模型回复内容，生成 200 响应的处理器"""

    def factory(content: str | None) -> RecordingHandler:
        return RecordingHandler(lambda request: httpx.Response(200, json=chat_envelope(content)))

    return factory


@pytest.fixture
def to_ms() -> Callable[[datetime], int]:
    return ms


@pytest.fixture
def envelope() -> Callable[[str | None], dict]:
    return chat_envelope


@pytest.fixture
def make_handler() -> type[RecordingHandler]:
    """返回 RecordingHandler 类，用于自定义响应"""
    return RecordingHandler
