"""
子树删除规划模块
计算删除某个节点时必须一起删除的完整ID集合（目标节点 + 全部后代）
"""

import logging
from collections import deque
from typing import Callable, Iterable, Set

from ...exceptions import BaseError, StoreUnavailableError

logger = logging.getLogger(__name__)

LookupChildren = Callable[[str], Iterable[str]]


class SubtreeDeletionPlanner:
    """
    子树删除规划器

    广度优先遍历，显式队列 + 已访问集合，不使用递归，
    栈深度与子树深度无关。每个出队的节点恰好查询一次子节点。
    规划器只计算集合，不执行删除；调用方对结果做一次批量删除。
    """

    def __init__(self, lookup_children: LookupChildren):
        """
        Args:
            lookup_children: 返回某节点直接子节点ID的外部查询
        """
        self._lookup_children = lookup_children

    def plan(self, target_id: str) -> Set[str]:
        """
        规划删除集合

        Args:
            target_id: 要删除的节点ID，不要求存在

        Returns:
            目标ID及其所有后代ID；目标不存在时为 {target_id}

        Raises:
            StoreUnavailableError: 子节点查询失败，不返回部分集合
        """
        to_delete: Set[str] = {target_id}
        queue = deque([target_id])
        lookups = 0

        while queue:
            current = queue.popleft()
            children = self._fetch_children(current)
            lookups += 1
            for child_id in children:
                # 入队前检查成员关系，保证每个ID至多入队一次
                if child_id not in to_delete:
                    to_delete.add(child_id)
                    queue.append(child_id)

        logger.debug(f"删除规划完成: target={target_id}, 共 {len(to_delete)} 个节点, 查询 {lookups} 次")
        return to_delete

    def _fetch_children(self, node_id: str) -> list:
        try:
            return list(self._lookup_children(node_id))
        except BaseError:
            raise
        except Exception as e:
            raise StoreUnavailableError(
                f"查询子节点失败: {node_id} ({e})",
                operation="fetch_children"
            ) from e


def plan_deletion(target_id: str, lookup_children: LookupChildren) -> Set[str]:
    """规划删除集合的便捷函数"""
    return SubtreeDeletionPlanner(lookup_children).plan(target_id)
