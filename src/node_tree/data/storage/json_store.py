"""
JSON文件存储实现
将所有记录存储在单个JSON文件中，人类可读，轻量级
适用于小项目、原型开发
"""

import json
import os
import threading
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .adapter import RecordStoreAdapter
from .exceptions import StorageOperationError
from ...core.node.entity import NodeRecord
from ...core.node.factory import generate_node_id
from ...exceptions import NodeNotFoundError


class JSONStore(RecordStoreAdapter):
    """
    JSON文件存储 - 所有数据存在单个JSON文件中

    文件结构: {"nodes": {node_id: {node_id, name, parent_id}}}
    每次写入先写临时文件再替换原文件，写入要么完整生效要么不生效。
    """

    store_type = "json"

    def __init__(self, file_path: str):
        """
        初始化JSON存储

        Args:
            file_path: JSON文件路径
        """
        self.file_path = Path(file_path)
        self._lock = threading.RLock()
        self._index: Optional[Dict[Optional[str], List[str]]] = None
        self._index_stamp: Optional[Tuple[int, int]] = None
        self._ensure_file_exists()

    def _ensure_file_exists(self):
        """确保JSON文件存在"""
        if not self.file_path.exists():
            try:
                self.file_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageOperationError(
                    f"无法创建目录: {e}", operation="init", store_type=self.store_type
                ) from e
            self._save_data({'nodes': {}})

    def _load_data(self) -> Dict[str, Any]:
        """加载JSON文件"""
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageOperationError(
                f"JSON文件损坏: {e}", operation="load", store_type=self.store_type
            ) from e
        except OSError as e:
            raise StorageOperationError(
                f"读取JSON文件失败: {e}", operation="load", store_type=self.store_type
            ) from e

        data.setdefault('nodes', {})
        return data

    def _save_data(self, data: Dict[str, Any]):
        """保存JSON文件（临时文件 + 原子替换）"""
        tmp_path = self.file_path.with_name(self.file_path.name + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageOperationError(
                f"写入JSON文件失败: {e}", operation="save", store_type=self.store_type
            ) from e
        finally:
            self._index = None

    def _file_stamp(self) -> Tuple[int, int]:
        try:
            stat = self.file_path.stat()
        except OSError as e:
            raise StorageOperationError(
                f"读取JSON文件失败: {e}", operation="load", store_type=self.store_type
            ) from e
        return stat.st_mtime_ns, stat.st_size

    def _children_index(self) -> Dict[Optional[str], List[str]]:
        """
        父ID -> 子ID列表索引

        文件未变化时复用上次的索引，逐层查询子节点不必每次重新解析整个文件。
        本实例写入后立即失效；其他进程改写文件时按修改时间和大小判断失效。
        """
        stamp = self._file_stamp()
        if self._index is None or stamp != self._index_stamp:
            index: Dict[Optional[str], List[str]] = defaultdict(list)
            for node_id, item in self._load_data()['nodes'].items():
                index[item.get('parent_id')].append(node_id)
            self._index, self._index_stamp = index, stamp
        return self._index

    # ========== 接口实现 ==========

    def fetch_all(self) -> List[NodeRecord]:
        with self._lock:
            data = self._load_data()
            return [NodeRecord.from_dict(item) for item in data['nodes'].values()]

    def fetch_children(self, parent_id: str) -> List[str]:
        with self._lock:
            return list(self._children_index().get(parent_id, ()))

    def fetch_one(self, node_id: str) -> Optional[NodeRecord]:
        with self._lock:
            item = self._load_data()['nodes'].get(node_id)
            return NodeRecord.from_dict(item) if item else None

    def insert(self, name: str, parent_id: Optional[str] = None) -> NodeRecord:
        with self._lock:
            data = self._load_data()
            if parent_id is not None and parent_id not in data['nodes']:
                raise NodeNotFoundError(parent_id)

            record = NodeRecord(generate_node_id(), name, parent_id)
            data['nodes'][record.node_id] = record.to_dict()
            self._save_data(data)
            return record

    def update_name(self, node_id: str, name: str) -> Optional[NodeRecord]:
        with self._lock:
            data = self._load_data()
            item = data['nodes'].get(node_id)
            if item is None:
                return None

            item['name'] = name
            self._save_data(data)
            return NodeRecord.from_dict(item)

    def bulk_delete(self, node_ids: Iterable[str]) -> int:
        with self._lock:
            data = self._load_data()
            deleted = 0
            for node_id in set(node_ids):
                if data['nodes'].pop(node_id, None) is not None:
                    deleted += 1

            if deleted:
                self._save_data(data)
            return deleted

    def count(self) -> int:
        with self._lock:
            return len(self._load_data()['nodes'])

    def clear(self) -> None:
        """清空所有数据（测试用）"""
        with self._lock:
            self._save_data({'nodes': {}})

    def __str__(self):
        return f"JSONStore(file={self.file_path}, nodes={self.count()})"
