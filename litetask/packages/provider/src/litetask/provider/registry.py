"""ProviderRegistry -- Provider 标识注册表

将 Provider 标识字符串（大小写不敏感）解析为 Provider 实例。
未知标识回退到默认 Provider 并记录 warning，不报错：
标识过期或拼错不应阻塞任务录入。
"""

from enum import StrEnum

import structlog

from .base import ExtractionProvider
from .config import ProviderConfig
from .deepseek import DeepSeekProvider
from .echo_provider import EchoProvider

log = structlog.get_logger()


class ProviderId(StrEnum):
    """已知 Provider 标识"""

    DEEPSEEK_V3_2 = "deepseek-v3.2"
    DEEPSEEK = "deepseek"
    ECHO = "echo"


# 别名 -> 规范标识
_ALIASES: dict[ProviderId, ProviderId] = {
    ProviderId.DEEPSEEK: ProviderId.DEEPSEEK_V3_2,
}

# 展示顺序（别名不展示）
_SUPPORTED_ORDER: list[ProviderId] = [ProviderId.DEEPSEEK_V3_2, ProviderId.ECHO]

FALLBACK_PROVIDER = ProviderId.DEEPSEEK_V3_2


def _lookup_id(identifier: str | None) -> ProviderId | None:
    if not identifier:
        return None
    try:
        provider_id = ProviderId(identifier.strip().lower())
    except ValueError:
        return None
    return _ALIASES.get(provider_id, provider_id)


class ProviderRegistry:
    """Provider 注册表 -- 固定的标识 -> 实例映射

    启动时创建，运行期间不变。
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        providers: dict[ProviderId, ExtractionProvider] | None = None,
    ) -> None:
        """初始化注册表

        Args:
            config: Provider 配置（后端地址、默认 Provider 等）
            providers: 自定义实例表，None 时按配置创建内置 Provider
        """
        config = config or ProviderConfig()
        if providers is None:
            providers = {
                ProviderId.DEEPSEEK_V3_2: DeepSeekProvider(config),
                ProviderId.ECHO: EchoProvider(),
            }
        self._providers = dict(providers)

        default_id = _lookup_id(config.default_provider)
        if default_id is None or default_id not in self._providers:
            log.warning(
                "unknown_default_provider",
                provider=config.default_provider,
                fallback=str(FALLBACK_PROVIDER),
            )
            default_id = FALLBACK_PROVIDER
        self._default_id = default_id

    @property
    def default_id(self) -> ProviderId:
        return self._default_id

    def resolve_id(self, identifier: str | None) -> ProviderId:
        """将标识解析为规范 ProviderId，未知标识返回默认"""
        provider_id = _lookup_id(identifier)
        if provider_id is None or provider_id not in self._providers:
            if identifier:
                log.warning(
                    "unknown_provider_fallback_to_default",
                    provider=identifier,
                    fallback=str(self._default_id),
                )
            return self._default_id
        return provider_id

    def get_provider(self, identifier: str | None) -> ExtractionProvider:
        """按标识获取 Provider（大小写不敏感，未知 -> 默认 Provider）"""
        return self._providers[self.resolve_id(identifier)]

    def get_supported_providers(self) -> list[tuple[str, str]]:
        """返回 (标识, 展示名称) 列表，仅用于展示"""
        return [
            (str(provider_id), self._providers[provider_id].get_provider_name())
            for provider_id in _SUPPORTED_ORDER
            if provider_id in self._providers
        ]
