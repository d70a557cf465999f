"""HistoryStore SQLite 实现

ai_history 表只追加不修改，支持单条删除与清空。
"""

import aiosqlite

from ..models import HistoryEntry


class SqliteHistoryStore:
    """HistoryStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append(self, entry: HistoryEntry) -> None:
        """追加一条解析历史

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            """
            INSERT INTO ai_history (history_id, content, source_type, timestamp,
                                    parsed_count, is_success)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                entry.history_id,
                entry.content,
                entry.source.value,
                entry.timestamp,
                entry.parsed_count,
                int(entry.is_success),
            ),
        )

    async def list_history(self) -> list[HistoryEntry]:
        """全部历史，按时间倒序"""
        cursor = await self._conn.execute(
            """
            SELECT history_id, content, source_type, timestamp, parsed_count, is_success
            FROM ai_history
            ORDER BY timestamp DESC, history_id DESC
            """
        )
        rows = await cursor.fetchall()
        return [
            HistoryEntry(
                history_id=row[0],
                content=row[1],
                source=row[2],
                timestamp=row[3],
                parsed_count=row[4],
                is_success=bool(row[5]),
            )
            for row in rows
        ]

    async def delete(self, history_id: str) -> bool:
        """删除单条历史"""
        cursor = await self._conn.execute(
            "DELETE FROM ai_history WHERE history_id = ?",
            (history_id,),
        )
        return cursor.rowcount > 0

    async def clear(self) -> int:
        """清空全部历史，返回删除条数"""
        cursor = await self._conn.execute("DELETE FROM ai_history")
        return cursor.rowcount

    async def count(self) -> int:
        cursor = await self._conn.execute("SELECT COUNT(*) FROM ai_history")
        row = await cursor.fetchone()
        return row[0]
