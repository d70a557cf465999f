"""LiteTask Provider -- 自然语言任务提取层

packages/provider 的公开接口导出。
"""

# 接口与实现
from .base import ExtractionProvider

# 配置
from .config import ProviderConfig, load_provider_config
from .deepseek import DeepSeekProvider
from .echo_provider import EchoProvider

# 异常
from .exceptions import (
    CredentialMissingError,
    FailureKind,
    ProviderError,
    ProviderHTTPError,
    ProviderUnreachableError,
)

# 数据模型
from .models import ProviderFailure, ProviderResult
from .registry import ProviderId, ProviderRegistry

__all__ = [
    "ExtractionProvider",
    "DeepSeekProvider",
    "EchoProvider",
    "ProviderId",
    "ProviderRegistry",
    "ProviderResult",
    "ProviderFailure",
    "FailureKind",
    "ProviderConfig",
    "load_provider_config",
    "ProviderError",
    "ProviderHTTPError",
    "ProviderUnreachableError",
    "CredentialMissingError",
]
