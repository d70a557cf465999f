"""structlog 配置

LITETASK_LOG_FORMAT=json 输出单行 JSON，其余取值用控制台渲染；
所有事件在渲染前经过凭据脱敏。
"""

import logging
import os

import structlog

# 事件字段名（小写）命中即脱敏
SENSITIVE_KEYS = frozenset({"api_key", "credential", "authorization", "secret"})
REDACTED = "***"


def redact_credentials(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """将凭据类字段替换为 ***"""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging() -> None:
    """初始化 structlog，并让标准库 logging 共用同一渲染器

    环境变量:
        LITETASK_LOG_FORMAT: "json" 或 "dev"（默认）
        LITETASK_LOG_LEVEL: 根日志级别（默认 INFO）
    """
    log_format = os.environ.get("LITETASK_LOG_FORMAT", "dev")
    log_level = os.environ.get("LITETASK_LOG_LEVEL", "INFO")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # httpx 在 INFO 级别会打印完整请求 URL
    logging.getLogger("httpx").setLevel(logging.WARNING)
