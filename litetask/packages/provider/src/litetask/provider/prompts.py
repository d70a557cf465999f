# 任务提取与子任务拆解的系统提示词
# 时间统一使用 yyyy-MM-dd HH:mm（本地时间），与 parsing.DATETIME_FORMAT 对应
from datetime import datetime

from litetask.core.models import TaskRecord, TaskType

from .parsing import DATETIME_FORMAT

EXTRACTION_PROMPT = """# Role: LiteTask 智能日程规划师
# Context: Now = {now}
# Goal: 将语音或文本输入解析为结构化 JSON Array。

# Rules
1. **拆分与纠错**: 识别多任务，每个任务单独一项；修正语音转写/逻辑错误。无有效任务时返回 `[]`。
2. **时间推断 (核心)**:
   - 默认/单点时间: 视为 endTime (截止)，startTime 设为 Now。
   - 明确起止: 仅在明确"从X到Y"时设定具体区间。
   - 无时间: startTime = Now，endTime = Now + 24h。
3. **分类**: 严格从以下类别中选择 (默认: WORK):
   {types}
4. **描述生成**: `description` 必须基于用户原始输入生成真实有意义的简要描述:
   - 提取并扩展用户提到的具体细节（地点、人物、数量、方式等）
   - 若用户输入简短，合理推断任务的目的或上下文
   - 禁止生成空洞模板化内容，每个描述必须与该任务直接相关
   - 长度控制在 10-50 字

# Output
仅返回纯 JSON 数组，无 Markdown。
[{{"title":"精炼标题<20字","startTime":"yyyy-MM-dd HH:mm","endTime":"yyyy-MM-dd HH:mm","type":"分类","description":"基于输入的真实任务描述"}}]
"""

SUBTASK_PROMPT = """# Role: LiteTask 智能日程规划师
# Context: Now = {now}
# Goal: 将复杂任务拆解为 3-6 个具体、可执行的子任务步骤，并以 JSON 数组格式返回。

# Task Details
- 标题: {title}
- 描述: {description}
- 类型: {type}
- 时间: {start} 至 {deadline}

# User Instruction
{instruction}

# Rules
1. **执行性**: 每个子任务必须是可直接执行的动作（"动词 + 名词"结构），如"撰写大纲"、"购买材料"。
2. **相关性**: 子任务必须服务于主任务的完成；用户提供了补充说明时严格按说明的方向拆解。
3. **逻辑性**: 按时间先后顺序排列步骤。
4. **简洁性**: 每个步骤不超过 15 个字。

# Output Format
仅返回一个纯 JSON 字符串数组，不要包含 Markdown 标记或其他文本。
示例: ["第一步内容", "第二步内容", "第三步内容"]
"""


def _fmt_ms(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime(DATETIME_FORMAT)


def build_extraction_prompt(now: datetime) -> str:
    """格式化提取提示词"""
    return EXTRACTION_PROMPT.format(
        now=now.strftime(DATETIME_FORMAT),
        types=" | ".join(t.value for t in TaskType),
    )


def build_subtask_prompt(now: datetime, task: TaskRecord, additional_context: str = "") -> str:
    """格式化子任务拆解提示词"""
    if additional_context.strip():
        instruction = f"用户补充说明 (必须优先遵循): {additional_context.strip()}"
    else:
        instruction = "用户未提供额外说明，请根据任务标题和描述自由发挥。"
    return SUBTASK_PROMPT.format(
        now=now.strftime(DATETIME_FORMAT),
        title=task.title,
        description=task.description or "无",
        type=task.type.value,
        start=_fmt_ms(task.start_time),
        deadline=_fmt_ms(task.deadline),
        instruction=instruction,
    )
