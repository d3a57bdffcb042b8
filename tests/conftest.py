"""
pytest配置文件
用于设置测试环境和共享fixtures
"""
import sys
import os

import pytest

# 将src目录添加到Python路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from node_tree.core.node import NodeRecord
from node_tree.data.storage import MemoryStore, JSONStore, SQLiteStore


@pytest.fixture
def sample_records():
    """A -> B -> C, D 为独立根"""
    return [
        NodeRecord("A", "华东", None),
        NodeRecord("B", "上海", "A"),
        NodeRecord("C", "浦东", "B"),
        NodeRecord("D", "华南", None),
    ]


@pytest.fixture(params=['memory', 'json', 'sqlite'])
def store(request, tmp_path):
    """参数化三种存储实现"""
    if request.param == 'memory':
        instance = MemoryStore()
    elif request.param == 'json':
        instance = JSONStore(str(tmp_path / "nodes.json"))
    else:
        instance = SQLiteStore(str(tmp_path / "nodes.db"))

    yield instance
    instance.close()


@pytest.fixture
def make_lookup():
    """根据记录列表构造 lookup_children，并记录每次查询的ID"""
    def factory(records):
        index = {}
        for record in records:
            if record.parent_id is not None:
                index.setdefault(record.parent_id, []).append(record.node_id)

        def lookup(node_id):
            lookup.calls.append(node_id)
            return list(index.get(node_id, []))

        lookup.calls = []
        return lookup

    return factory
