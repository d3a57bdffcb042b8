"""
树组装模块
将扁平的父引用记录集合重建为嵌套的森林
"""

import logging
from collections import deque
from typing import Dict, Any, Iterable, List, Union

from .entity import NodeRecord, TreeNode

logger = logging.getLogger(__name__)

RecordLike = Union[NodeRecord, Dict[str, Any]]


class TreeAssembler:
    """
    树组装器

    两遍扫描，O(n)：
    1. 建立 node_id -> TreeNode 映射
    2. 按每条记录自身的 parent_id 挂接到父节点

    从不沿父链回溯，所以即使数据中存在环也不会死循环，
    环上的节点只是从任何根都不可达。
    """

    def assemble(self, records: Iterable[RecordLike]) -> List[TreeNode]:
        """
        组装森林

        Args:
            records: 一棵层级的完整扁平记录（NodeRecord 或字典）

        Returns:
            根节点列表；parent_id 为 None 或父节点不存在的记录均作为根
        """
        nodes: Dict[str, TreeNode] = {}
        for item in records:
            record = NodeRecord.coerce(item)
            if record.node_id in nodes:
                logger.warning(f"重复的节点ID，后者覆盖前者: {record.node_id}")
            nodes[record.node_id] = TreeNode.from_record(record)

        roots: List[TreeNode] = []
        for node in nodes.values():
            if node.parent_id is None:
                roots.append(node)
                continue

            parent = nodes.get(node.parent_id)
            if parent is None:
                # 悬空引用：降级为根节点
                logger.debug(f"父节点不存在，作为根节点处理: {node.node_id} -> {node.parent_id}")
                roots.append(node)
            else:
                parent.add_child(node)

        return roots


def assemble(records: Iterable[RecordLike]) -> List[TreeNode]:
    """组装森林的便捷函数"""
    return TreeAssembler().assemble(records)


def count_nodes(forest: List[TreeNode]) -> int:
    """森林中的节点总数"""
    return sum(root.count() for root in forest)


def forest_depth(forest: List[TreeNode]) -> int:
    """森林的最大深度（根为0，空森林为0）"""
    max_depth = 0
    queue = deque((root, 0) for root in forest)
    while queue:
        node, depth = queue.popleft()
        max_depth = max(max_depth, depth)
        queue.extend((child, depth + 1) for child in node.children)
    return max_depth
