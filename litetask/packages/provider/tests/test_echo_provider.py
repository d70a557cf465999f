"""EchoProvider 单元测试"""

from datetime import datetime

from litetask.core.models import TaskRecord, TaskType
from litetask.provider import EchoProvider

DAY_MS = 24 * 3_600_000


class TestEchoProvider:
    async def test_each_line_becomes_task(self, fixed_now, to_ms):
        provider = EchoProvider(now_fn=lambda: fixed_now)
        text = "买牛奶\n\n  交电费  \n"

        result = await provider.parse_tasks_from_text("", text)

        assert result.ok
        assert [t.title for t in result.value] == ["买牛奶", "交电费"]
        task = result.value[0]
        assert task.start_time == to_ms(fixed_now)
        assert task.deadline == to_ms(fixed_now) + DAY_MS
        assert task.type == TaskType.WORK
        assert task.original_source_text == text

    async def test_blank_input_is_empty(self):
        result = await EchoProvider().parse_tasks_from_text("", "   \n ")
        assert result.ok
        assert result.value == []

    async def test_subtasks_from_context(self):
        task = TaskRecord(title="搬家", start_time=0, deadline=1)
        result = await EchoProvider().generate_subtasks("", task, "打包；叫车，搬运")
        assert result.value == ["打包", "叫车", "搬运"]

    async def test_subtasks_fallback_to_title(self):
        task = TaskRecord(title="搬家", start_time=0, deadline=1)
        result = await EchoProvider().generate_subtasks("", task)
        assert result.value == ["搬家"]

    async def test_connection_always_ok(self):
        result = await EchoProvider().test_connection("")
        assert result.ok and result.value is True

    def test_metadata(self):
        provider = EchoProvider(now_fn=datetime.now)
        assert provider.get_provider_name() == "Echo (offline)"
        assert provider.requires_credential is False
