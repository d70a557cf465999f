"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、紧急窗口等可配置常量。
"""

import os
from pathlib import Path

import structlog

log = structlog.get_logger()

# 默认紧急窗口（小时）
DEFAULT_URGENT_WINDOW_HOURS = 24

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("LITETASK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "LITETASK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "litetask.db"),
    )


def get_urgent_window_ms() -> int:
    """获取默认紧急窗口（毫秒）

    LITETASK_URGENT_WINDOW_HOURS 非法时记录 warning 并使用默认值。
    """
    raw = os.environ.get("LITETASK_URGENT_WINDOW_HOURS")
    if not raw:
        return DEFAULT_URGENT_WINDOW_HOURS * HOUR_MS
    try:
        hours = int(raw)
        if hours <= 0:
            raise ValueError(raw)
    except ValueError:
        log.warning(
            "invalid_urgent_window_config",
            env_var="LITETASK_URGENT_WINDOW_HOURS",
            value=raw,
            fallback=DEFAULT_URGENT_WINDOW_HOURS,
        )
        return DEFAULT_URGENT_WINDOW_HOURS * HOUR_MS
    return hours * HOUR_MS


# 导出/导入备份文件格式版本
BACKUP_FORMAT_VERSION: int = 1
