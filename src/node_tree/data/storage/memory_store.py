"""
内存存储实现
数据保存在内存中，程序结束即消失
"""
import threading
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .adapter import RecordStoreAdapter
from ...core.node.entity import NodeRecord
from ...core.node.factory import generate_node_id
from ...exceptions import NodeNotFoundError


class MemoryStore(RecordStoreAdapter):
    """内存存储实现"""

    store_type = "memory"

    def __init__(self):
        self._lock = threading.RLock()  # 线程安全锁

        # 内存数据结构
        self._nodes: Dict[str, NodeRecord] = {}  # node_id -> record

        # 索引：parent_id -> {child_id: None}，dict 保持插入顺序
        self._children: Dict[str, Dict[str, None]] = defaultdict(dict)

    def fetch_all(self) -> List[NodeRecord]:
        """获取全部记录"""
        with self._lock:
            return [self._copy(record) for record in self._nodes.values()]

    def fetch_children(self, parent_id: str) -> List[str]:
        """获取直接子节点ID列表"""
        with self._lock:
            if parent_id not in self._children:
                return []
            return list(self._children[parent_id])

    def fetch_one(self, node_id: str) -> Optional[NodeRecord]:
        """根据ID获取记录"""
        with self._lock:
            record = self._nodes.get(node_id)
            return self._copy(record) if record else None

    def insert(self, name: str, parent_id: Optional[str] = None) -> NodeRecord:
        """插入新记录"""
        with self._lock:
            if parent_id is not None and parent_id not in self._nodes:
                raise NodeNotFoundError(parent_id)

            record = NodeRecord(generate_node_id(), name, parent_id)
            self._nodes[record.node_id] = record
            if parent_id is not None:
                self._children[parent_id][record.node_id] = None

            return self._copy(record)

    def update_name(self, node_id: str, name: str) -> Optional[NodeRecord]:
        """更新节点名称"""
        with self._lock:
            record = self._nodes.get(node_id)
            if record is None:
                return None

            record.name = name
            return self._copy(record)

    def bulk_delete(self, node_ids: Iterable[str]) -> int:
        """批量删除，整个过程持有锁"""
        with self._lock:
            deleted = 0
            for node_id in set(node_ids):
                record = self._nodes.pop(node_id, None)
                if record is None:
                    continue

                deleted += 1
                self._children.pop(node_id, None)
                if record.parent_id is not None and record.parent_id in self._children:
                    self._children[record.parent_id].pop(node_id, None)

            return deleted

    def count(self) -> int:
        with self._lock:
            return len(self._nodes)

    def clear(self) -> None:
        """清空所有数据（测试用）"""
        with self._lock:
            self._nodes.clear()
            self._children.clear()

    @staticmethod
    def _copy(record: NodeRecord) -> NodeRecord:
        # 返回副本，调用方修改不影响存储内容
        return NodeRecord(record.node_id, record.name, record.parent_id)

    def __str__(self):
        return f"MemoryStore(nodes={self.count()})"
