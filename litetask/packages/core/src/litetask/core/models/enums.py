"""枚举定义

包含 TaskType 任务分类、HistorySource 解析来源，
以及 AI 返回分类文本到 TaskType 的宽松映射。
"""

from enum import StrEnum


class TaskType(StrEnum):
    """任务分类（封闭枚举）"""

    WORK = "WORK"
    LIFE = "LIFE"
    STUDY = "STUDY"
    URGENT = "URGENT"
    HEALTH = "HEALTH"


class HistorySource(StrEnum):
    """AI 解析历史来源"""

    VOICE = "VOICE"  # 语音转任务
    TEXT = "TEXT"  # 文本转任务
    SUBTASK = "SUBTASK"  # 子任务拆解


# 中文分类名 -> TaskType
_CHINESE_TYPE_ALIASES: dict[str, TaskType] = {
    "工作": TaskType.WORK,
    "生活": TaskType.LIFE,
    "学习": TaskType.STUDY,
    "紧急": TaskType.URGENT,
    "健康": TaskType.HEALTH,
}


def coerce_task_type(value: object) -> TaskType:
    """将任意分类 token 映射为 TaskType

    规则:
        1. 大小写不敏感匹配英文枚举名
        2. 匹配中文分类名
        3. 其余（None、非字符串、未知值）一律降级为 WORK
    """
    if not isinstance(value, str):
        return TaskType.WORK
    token = value.strip()
    upper = token.upper()
    if upper in TaskType.__members__:
        return TaskType[upper]
    return _CHINESE_TYPE_ALIASES.get(token, TaskType.WORK)
