"""ProviderConfig -- Provider 配置加载

从环境变量加载配置，不硬编码后端地址/模型名。
"""

import os

import structlog
from pydantic import BaseModel, Field, ValidationError

log = structlog.get_logger()


class ProviderConfig(BaseModel):
    """Provider 包配置 -- 从环境变量加载

    环境变量:
        LITETASK_LLM_BASE_URL: 后端 API 基础地址（默认 https://api.deepseek.com/v1）
        LITETASK_LLM_MODEL: 模型标识（默认 deepseek-chat）
        LITETASK_LLM_TIMEOUT_S: 连接/读/写超时（秒，默认 30）
        LITETASK_LLM_TEMPERATURE: 采样温度（默认 0.7）
        LITETASK_LLM_MAX_TOKENS: 最大生成 token 数（默认 1000）
        LITETASK_DEFAULT_PROVIDER: 默认 Provider 标识（默认 deepseek-v3.2）
    """

    base_url: str = Field(
        default="https://api.deepseek.com/v1",
        description="后端 API 基础地址",
    )
    model: str = Field(default="deepseek-chat", description="后端模型标识")
    timeout_s: float = Field(default=30, gt=0, description="连接/读/写超时（秒）")
    temperature: float = Field(default=0.7, ge=0, le=2, description="采样温度")
    max_tokens: int = Field(default=1000, ge=1, description="最大生成 token 数")
    default_provider: str = Field(
        default="deepseek-v3.2",
        description="未知标识时回退到的 Provider",
    )


def _read_number(env_var: str, kwargs: dict, field: str) -> None:
    """按字段约束校验单个数值环境变量，无法解析或越界时保留默认值"""
    val = os.environ.get(env_var)
    if not val:
        return
    try:
        checked = ProviderConfig.model_validate({field: val.strip()})
    except ValidationError:
        log.warning(
            "invalid_provider_config",
            env_var=env_var,
            value=val,
            fallback=ProviderConfig.model_fields[field].default,
        )
        return
    kwargs[field] = getattr(checked, field)


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("LITETASK_LLM_BASE_URL"):
        kwargs["base_url"] = val.rstrip("/")

    if val := os.environ.get("LITETASK_LLM_MODEL"):
        kwargs["model"] = val

    if val := os.environ.get("LITETASK_DEFAULT_PROVIDER"):
        kwargs["default_provider"] = val

    _read_number("LITETASK_LLM_TIMEOUT_S", kwargs, "timeout_s")
    _read_number("LITETASK_LLM_TEMPERATURE", kwargs, "temperature")
    _read_number("LITETASK_LLM_MAX_TOKENS", kwargs, "max_tokens")

    return ProviderConfig(**kwargs)
