"""InMemorySecretStore -- 进程内凭据存储

实现 litetask.core.store.SecretStore 接口。
凭据只保存在内存中，启动时可从 LITETASK_API_KEY 预置。
"""

import os

# 后端 API Key 的存储键
API_KEY_SECRET = "llm_api_key"


class InMemorySecretStore:
    """进程内凭据存储"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._secrets: dict[str, str] = dict(initial or {})

    @classmethod
    def from_env(cls) -> "InMemorySecretStore":
        """从环境变量预置凭据"""
        initial = {}
        if val := os.environ.get("LITETASK_API_KEY"):
            initial[API_KEY_SECRET] = val
        return cls(initial)

    def get_secret(self, key: str) -> str | None:
        value = self._secrets.get(key)
        return value or None

    def set_secret(self, key: str, value: str) -> None:
        if value:
            self._secrets[key] = value
        else:
            # 空串视为清除
            self._secrets.pop(key, None)
