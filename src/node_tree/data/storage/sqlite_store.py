"""
SQLite数据库存储实现
数据保存在SQLite数据库中，批量删除在单个事务内完成
"""
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, List, Optional

from .adapter import RecordStoreAdapter
from .exceptions import StorageConnectionError, StorageOperationError
from ...core.node.entity import NodeRecord
from ...core.node.factory import generate_node_id
from ...exceptions import NodeNotFoundError

# 单条语句中的参数个数上限，低于SQLite旧版本的999
DELETE_BATCH_SIZE = 500


class SQLiteStore(RecordStoreAdapter):
    """SQLite数据库存储实现"""

    store_type = "sqlite"

    def __init__(self, db_path: str, timeout: float = 30.0):
        """
        初始化SQLite存储

        Args:
            db_path: 数据库文件路径
            timeout: 等待数据库锁的秒数
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._lock = threading.RLock()

        # 确保目录存在
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageConnectionError(f"无法创建数据库目录: {e}", store_type=self.store_type) from e

        # 初始化数据库
        self._init_database()

    @contextmanager
    def _get_connection(self, operation: str):
        """获取数据库连接（上下文管理器），sqlite3.Error 转换为存储异常"""
        try:
            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=self.timeout
            )
        except sqlite3.Error as e:
            raise StorageConnectionError(str(e), store_type=self.store_type) from e
        conn.row_factory = sqlite3.Row  # 返回字典式行

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageOperationError(str(e), operation=operation, store_type=self.store_type) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """初始化数据库表结构"""
        with self._get_connection("init") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS nodes (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    node_id TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    parent_id TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_nodes_parent ON nodes(parent_id)")

    @staticmethod
    def _row_to_record(row) -> NodeRecord:
        return NodeRecord(row['node_id'], row['name'], row['parent_id'])

    def fetch_all(self) -> List[NodeRecord]:
        with self._lock:
            with self._get_connection("fetch_all") as conn:
                cursor = conn.execute("SELECT node_id, name, parent_id FROM nodes ORDER BY seq")
                return [self._row_to_record(row) for row in cursor.fetchall()]

    def fetch_children(self, parent_id: str) -> List[str]:
        with self._lock:
            with self._get_connection("fetch_children") as conn:
                cursor = conn.execute(
                    "SELECT node_id FROM nodes WHERE parent_id = ? ORDER BY seq",
                    (parent_id,)
                )
                return [row['node_id'] for row in cursor.fetchall()]

    def fetch_one(self, node_id: str) -> Optional[NodeRecord]:
        with self._lock:
            with self._get_connection("fetch_one") as conn:
                cursor = conn.execute(
                    "SELECT node_id, name, parent_id FROM nodes WHERE node_id = ?",
                    (node_id,)
                )
                row = cursor.fetchone()
                return self._row_to_record(row) if row else None

    def insert(self, name: str, parent_id: Optional[str] = None) -> NodeRecord:
        with self._lock:
            with self._get_connection("insert") as conn:
                if parent_id is not None:
                    cursor = conn.execute(
                        "SELECT 1 FROM nodes WHERE node_id = ?",
                        (parent_id,)
                    )
                    if not cursor.fetchone():
                        raise NodeNotFoundError(parent_id)

                record = NodeRecord(generate_node_id(), name, parent_id)
                conn.execute(
                    "INSERT INTO nodes (node_id, name, parent_id) VALUES (?, ?, ?)",
                    (record.node_id, record.name, record.parent_id)
                )
                return record

    def update_name(self, node_id: str, name: str) -> Optional[NodeRecord]:
        with self._lock:
            with self._get_connection("update_name") as conn:
                cursor = conn.execute(
                    "UPDATE nodes SET name = ? WHERE node_id = ?",
                    (name, node_id)
                )
                if cursor.rowcount == 0:
                    return None

                row = conn.execute(
                    "SELECT node_id, name, parent_id FROM nodes WHERE node_id = ?",
                    (node_id,)
                ).fetchone()
                return self._row_to_record(row)

    def bulk_delete(self, node_ids: Iterable[str]) -> int:
        """批量删除，所有分批语句在同一事务中提交"""
        ids = list(set(node_ids))
        if not ids:
            return 0

        with self._lock:
            with self._get_connection("bulk_delete") as conn:
                deleted = 0
                for start in range(0, len(ids), DELETE_BATCH_SIZE):
                    batch = ids[start:start + DELETE_BATCH_SIZE]
                    placeholders = ", ".join("?" for _ in batch)
                    cursor = conn.execute(
                        f"DELETE FROM nodes WHERE node_id IN ({placeholders})",
                        batch
                    )
                    deleted += cursor.rowcount
                return deleted

    def count(self) -> int:
        with self._lock:
            with self._get_connection("count") as conn:
                return conn.execute("SELECT COUNT(*) FROM nodes").fetchone()[0]

    def clear(self) -> None:
        """清空所有数据（测试用）"""
        with self._lock:
            with self._get_connection("clear") as conn:
                conn.execute("DELETE FROM nodes")

    def __str__(self):
        return f"SQLiteStore(db={self.db_path}, nodes={self.count()})"
