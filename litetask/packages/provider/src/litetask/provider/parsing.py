"""模型输出解析 -- 两阶段容错管线

阶段 1: 去除模型常见的 Markdown 代码块包裹，解码为宽松的 JSON 结构
阶段 2: 逐元素、逐字段映射为 TaskRecord，每个字段有独立的默认值/降级规则，
        单个坏字段不会使整条记录失效，单条坏元素不会使整个列表失效

模型输出无法解码时返回空列表而非失败：网络交换本身已成功，空任务列表是合法且安全的结果。
"""

import json
import re
from datetime import datetime
from typing import Any

import structlog
from litetask.core.config import DAY_MS, HOUR_MS
from litetask.core.models import TaskRecord, coerce_task_type

log = structlog.get_logger()

# 与提示词约定的时间格式（本地时间）
DATETIME_FORMAT = "%Y-%m-%d %H:%M"

_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*")
_NUMBERED_RE = re.compile(r"^\d+[.、)]\s*")
_BULLET_RE = re.compile(r"^[•·\-*]\s*")


def strip_code_fences(raw: str) -> str:
    """去除 ``` / ```json 等代码块标记"""
    return _FENCE_RE.sub("", raw).strip()


def decode_json_array(raw: str) -> list[Any] | None:
    """阶段 1：去包裹后解码为 JSON 数组

    Returns:
        解码出的列表；不是合法 JSON 数组时返回 None
    """
    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        log.warning("model_output_not_json", error=str(e), preview=cleaned[:200])
        return None
    if not isinstance(data, list):
        log.warning("model_output_not_array", json_type=type(data).__name__)
        return None
    return data


def parse_datetime_ms(value: Any) -> int | None:
    """解析 yyyy-MM-dd HH:mm 为毫秒时间戳，失败返回 None"""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.strptime(value.strip(), DATETIME_FORMAT)
        # 极端年份在本地时区换算时可能越界
        return int(parsed.timestamp() * 1000)
    except (ValueError, OverflowError, OSError):
        return None


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def map_task_element(element: Any, source_text: str, now_ms: int) -> TaskRecord | None:
    """阶段 2：将单个数组元素映射为 TaskRecord

    字段规则:
        title        必填，缺失/非字符串/空白时跳过该元素
        startTime    缺失或无法解析 -> now
        endTime      缺失 -> now + 24h；无法解析 -> startTime + 1h
        type         大小写不敏感，未知值 -> WORK
        description  缺失或非字符串 -> ""
    """
    if not isinstance(element, dict):
        return None

    title = element.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    start_ms = parse_datetime_ms(element.get("startTime"))
    if start_ms is None:
        start_ms = now_ms

    end_raw = element.get("endTime")
    if _is_missing(end_raw):
        deadline_ms = now_ms + DAY_MS
    else:
        deadline_ms = parse_datetime_ms(end_raw)
        if deadline_ms is None:
            deadline_ms = start_ms + HOUR_MS

    description = element.get("description")
    if not isinstance(description, str):
        description = ""

    return TaskRecord(
        title=title.strip(),
        description=description.strip(),
        start_time=start_ms,
        deadline=deadline_ms,
        type=coerce_task_type(element.get("type")),
        original_source_text=source_text,
    )


def parse_tasks_content(content: str, source_text: str, now_ms: int) -> list[TaskRecord]:
    """将模型回复内容解析为任务列表（保持模型返回顺序）"""
    elements = decode_json_array(content)
    if elements is None:
        return []

    records: list[TaskRecord] = []
    for index, element in enumerate(elements):
        record = map_task_element(element, source_text, now_ms)
        if record is None:
            log.info("task_element_skipped", index=index)
            continue
        records.append(record)
    return records


def parse_subtask_content(content: str) -> list[str]:
    """解析子任务步骤列表

    优先按 JSON 字符串数组解析；失败时退化为按行切分并去掉序号/项目符号。
    """
    elements = decode_json_array(content)
    if elements is not None:
        steps = []
        for element in elements:
            if isinstance(element, (str, int, float)) and str(element).strip():
                steps.append(str(element).strip())
        return steps

    steps = []
    for line in strip_code_fences(content).splitlines():
        line = line.strip()
        if not line or line.startswith("[") or line.startswith("]"):
            continue
        line = _BULLET_RE.sub("", _NUMBERED_RE.sub("", line)).strip().strip('",')
        if line:
            steps.append(line)
    return steps
