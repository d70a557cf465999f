"""CLI 入口模块 -- python -m litetask.core <command>

支持的命令：
  export-backup <file>  导出全部任务到备份文件
  import-backup <file>  从备份文件对账导入
"""

import asyncio
import sys
from pathlib import Path

from .config import get_db_path

_USAGE = """用法: python -m litetask.core <command> <file>
命令:
  export-backup <file>  导出全部任务到备份文件
  import-backup <file>  从备份文件对账导入"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 3:
        print(_USAGE)
        sys.exit(1)

    command, file_path = sys.argv[1], Path(sys.argv[2])

    if command == "export-backup":
        asyncio.run(export_backup(file_path))
    elif command == "import-backup":
        exit_code = asyncio.run(import_backup(file_path))
        sys.exit(exit_code)
    else:
        print(f"未知命令: {command}")
        print("可用命令: export-backup, import-backup")
        sys.exit(1)


async def export_backup(file_path: Path) -> None:
    """导出备份到文件"""
    from .backup import BackupService
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        service = BackupService(store_group.conn, store_group.task_store, store_group.write_lock)
        file_path.write_text(await service.export_backup_json(), encoding="utf-8")
        print(f"导出完成: {file_path}")
    finally:
        await store_group.conn.close()


async def import_backup(file_path: Path) -> int:
    """从文件导入备份，返回进程退出码"""
    from .backup import BackupService
    from .models import ReconcileSuccess
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    payload = file_path.read_text(encoding="utf-8")
    store_group = await create_store_group(db_path)
    try:
        service = BackupService(store_group.conn, store_group.task_store, store_group.write_lock)
        result = await service.restore_backup(payload)
    finally:
        await store_group.conn.close()

    if isinstance(result, ReconcileSuccess):
        print(f"导入完成: 新增 {result.imported_count} 条，跳过 {result.skipped_count} 条")
        return 0
    print(f"导入失败 ({result.kind}): {result.cause}")
    return 1


if __name__ == "__main__":
    main()
