"""SQLite 数据库初始化

PRAGMA 配置 + 四张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id                    INTEGER PRIMARY KEY AUTOINCREMENT,
    title                 TEXT NOT NULL,
    description           TEXT NOT NULL DEFAULT '',
    start_time            INTEGER NOT NULL,
    deadline              INTEGER NOT NULL,
    type                  TEXT NOT NULL DEFAULT 'WORK',
    is_done               INTEGER NOT NULL DEFAULT 0,
    is_pinned             INTEGER NOT NULL DEFAULT 0,
    original_source_text  TEXT,
    created_at            INTEGER NOT NULL
);
"""

_TASKS_INDEXES = [
    # 首页列表依赖 deadline 排序
    "CREATE INDEX IF NOT EXISTS idx_tasks_deadline ON tasks(deadline);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_is_done ON tasks(is_done);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_is_pinned ON tasks(is_pinned);",
    # 对账身份元组查找
    (
        "CREATE INDEX IF NOT EXISTS idx_tasks_identity "
        "ON tasks(title, start_time, deadline);"
    ),
]

# sub_tasks 表 DDL（父任务删除时级联删除）
_SUB_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS sub_tasks (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id       INTEGER NOT NULL,
    content       TEXT NOT NULL,
    is_completed  INTEGER NOT NULL DEFAULT 0,
    sort_order    INTEGER NOT NULL DEFAULT 0,

    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
);
"""

# reminders 表 DDL
_REMINDERS_DDL = """
CREATE TABLE IF NOT EXISTS reminders (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id     INTEGER NOT NULL,
    trigger_at  INTEGER NOT NULL,
    label       TEXT,
    is_fired    INTEGER NOT NULL DEFAULT 0,

    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
);
"""

_CHILD_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_sub_tasks_task_id ON sub_tasks(task_id);",
    "CREATE INDEX IF NOT EXISTS idx_reminders_task_id ON reminders(task_id);",
]

# ai_history 表 DDL
_AI_HISTORY_DDL = """
CREATE TABLE IF NOT EXISTS ai_history (
    history_id    TEXT PRIMARY KEY,
    content       TEXT NOT NULL,
    source_type   TEXT NOT NULL,
    timestamp     INTEGER NOT NULL,
    parsed_count  INTEGER NOT NULL DEFAULT 0,
    is_success    INTEGER NOT NULL DEFAULT 1
);
"""

_AI_HISTORY_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_ai_history_timestamp ON ai_history(timestamp DESC);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_TASKS_DDL)
    await conn.execute(_SUB_TASKS_DDL)
    await conn.execute(_REMINDERS_DDL)
    await conn.execute(_AI_HISTORY_DDL)

    for idx_sql in _TASKS_INDEXES + _CHILD_INDEXES + _AI_HISTORY_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
