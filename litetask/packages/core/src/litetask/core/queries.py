"""查询契约 -- 排序与过滤规则的纯 Python 参考实现

任何存储引擎都必须与这里的结果逐行一致（包括置顶优先、截止时间次之的 tie-break），
UI 与提醒逻辑依赖首行语义。SqliteTaskStore 的 SQL 与本模块一一对应。
同截止时间的记录按 id 升序兜底，保证结果稳定。
"""

from collections.abc import Iterable

from .models import TaskRecord


def _id_key(task: TaskRecord) -> int:
    return task.id if task.id is not None else 0


def active_sorted(tasks: Iterable[TaskRecord]) -> list[TaskRecord]:
    """活跃视图：未完成，置顶 DESC，deadline ASC"""
    active = [t for t in tasks if not t.is_done]
    return sorted(active, key=lambda t: (not t.is_pinned, t.deadline, _id_key(t)))


def urgent(
    tasks: Iterable[TaskRecord],
    now_ms: int,
    window_ms: int,
) -> list[TaskRecord]:
    """紧急视图：未完成且 deadline <= now + window，deadline ASC"""
    limit = now_ms + window_ms
    hits = [t for t in tasks if not t.is_done and t.deadline <= limit]
    return sorted(hits, key=lambda t: (t.deadline, _id_key(t)))


def in_range(
    tasks: Iterable[TaskRecord],
    range_start: int,
    range_end: int,
) -> list[TaskRecord]:
    """区间视图：start_time >= range_start 且 deadline <= range_end，deadline ASC"""
    hits = [
        t for t in tasks if t.start_time >= range_start and t.deadline <= range_end
    ]
    return sorted(hits, key=lambda t: (t.deadline, _id_key(t)))
