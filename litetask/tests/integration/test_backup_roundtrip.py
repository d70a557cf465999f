"""端到端：提取入库 -> 导出备份 -> 对账导入

覆盖 HTTP 层、提取服务、存储层与备份对账的完整链路。
"""

from pathlib import Path

from httpx import ASGITransport, AsyncClient


class TestExtractBackupRoundTrip:
    async def test_reimport_into_same_store_skips_all(self, client: AsyncClient):
        resp = await client.post(
            "/api/extract",
            json={"text": "交房租\n取快递\n预约体检", "persist": True},
        )
        assert resp.status_code == 200
        assert resp.json()["provider"] == "echo"

        task_id = resp.json()["tasks"][0]["id"]
        resp = await client.post(
            f"/api/tasks/{task_id}/subtasks/generate",
            json={"context": "转账，截图"},
        )
        assert resp.status_code == 200

        backup = (await client.get("/api/backup/export")).content
        resp = await client.post("/api/backup/import", content=backup)

        assert resp.json() == {"status": "success", "imported_count": 0, "skipped_count": 3}
        active = (await client.get("/api/tasks/active")).json()["tasks"]
        assert len(active) == 3

    async def test_import_into_fresh_store(
        self, client: AsyncClient, tmp_path: Path, attach_state
    ):
        await client.post("/api/extract", json={"text": "交房租\n取快递", "persist": True})
        active = (await client.get("/api/tasks/active")).json()["tasks"]
        await client.post(
            f"/api/tasks/{active[0]['id']}/subtasks/generate",
            json={"context": "转账；截图"},
        )
        backup = (await client.get("/api/backup/export")).content

        from litetask.gateway.main import create_app

        fresh = create_app()
        store_group = await attach_state(fresh, str(tmp_path / "fresh.db"))
        try:
            async with AsyncClient(
                transport=ASGITransport(app=fresh),
                base_url="http://test",
            ) as c2:
                resp = await c2.post("/api/backup/import", content=backup)
                assert resp.json()["imported_count"] == 2
                assert resp.json()["skipped_count"] == 0

                # 再导入一次全部跳过
                resp = await c2.post("/api/backup/import", content=backup)
                assert resp.json()["skipped_count"] == 2

                restored = (await c2.get("/api/tasks/active")).json()["tasks"]
                assert {t["title"] for t in restored} == {"交房租", "取快递"}
                target = [t for t in restored if t["title"] == active[0]["title"]][0]
                detail = (await c2.get(f"/api/tasks/{target['id']}")).json()
                assert [s["content"] for s in detail["sub_tasks"]] == ["转账", "截图"]
        finally:
            await store_group.conn.close()


class TestDurability:
    async def test_tasks_survive_restart(self, tmp_path: Path, attach_state):
        """创建任务 -> 关闭 Store -> 重新打开 -> 数据完整"""
        from litetask.gateway.main import create_app

        db_path = str(tmp_path / "durable.db")

        app1 = create_app()
        sg1 = await attach_state(app1, db_path)
        async with AsyncClient(transport=ASGITransport(app=app1), base_url="http://test") as c1:
            resp = await c1.post("/api/tasks", json={"title": "持久任务", "deadline": 5_000})
            task_id = resp.json()["id"]
        await sg1.conn.close()

        app2 = create_app()
        sg2 = await attach_state(app2, db_path)
        try:
            async with AsyncClient(
                transport=ASGITransport(app=app2),
                base_url="http://test",
            ) as c2:
                resp = await c2.get(f"/api/tasks/{task_id}")
                assert resp.status_code == 200
                assert resp.json()["task"]["title"] == "持久任务"
        finally:
            await sg2.conn.close()
