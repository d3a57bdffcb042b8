"""
节点仓库模块
连接存储与核心算法：读取时组装森林，删除时先规划再批量删除
"""

import logging
from collections import deque
from typing import Optional, List, Set, TYPE_CHECKING

from .entity import NodeRecord, TreeNode
from .assembler import TreeAssembler, forest_depth
from .deletion import SubtreeDeletionPlanner
from ...exceptions import NodeNotFoundError

if TYPE_CHECKING:
    # 存储模块依赖 entity，运行时导入会形成循环
    from ...data.storage.adapter import RecordStoreAdapter

logger = logging.getLogger(__name__)


class NodeRepository:
    """节点仓库，基于记录存储提供树的读写操作"""

    def __init__(self, store: 'RecordStoreAdapter'):
        """
        初始化节点仓库

        Args:
            store: 节点记录存储
        """
        self._store = store
        self._assembler = TreeAssembler()
        self._planner = SubtreeDeletionPlanner(store.fetch_children)

    @property
    def store(self) -> 'RecordStoreAdapter':
        return self._store

    # ===== 读取 =====

    def get_tree(self) -> List[TreeNode]:
        """读取全部记录并组装为森林"""
        records = self._store.fetch_all()
        forest = self._assembler.assemble(records)
        logger.debug(f"组装森林: {len(records)} 条记录, {len(forest)} 个根节点")
        return forest

    def get_node(self, node_id: str) -> NodeRecord:
        """根据ID获取记录，不存在时抛出 NodeNotFoundError"""
        record = self._store.fetch_one(node_id)
        if record is None:
            raise NodeNotFoundError(node_id)
        return record

    def get_node_count(self) -> int:
        """获取节点数量"""
        return self._store.count()

    def get_tree_depth(self) -> int:
        """获取森林的最大深度（根为0，空森林为0）"""
        return forest_depth(self.get_tree())

    def find_nodes(self, **criteria) -> List[NodeRecord]:
        """
        根据条件查找节点

        Args:
            **criteria: 查找条件，如 name="华东", parent_id=None

        Returns:
            匹配的记录列表
        """
        results = []
        for record in self._store.fetch_all():
            if all(getattr(record, key, object()) == value for key, value in criteria.items()):
                results.append(record)
        return results

    def traverse(self, order: str = "preorder") -> List[TreeNode]:
        """
        遍历森林

        Args:
            order: 遍历顺序，可选 "preorder"（前序）, "postorder"（后序）, "levelorder"（层序）

        Returns:
            节点列表
        """
        forest = self.get_tree()
        result: List[TreeNode] = []

        if order == "preorder":
            stack = list(reversed(forest))
            while stack:
                node = stack.pop()
                result.append(node)
                stack.extend(reversed(node.children))
        elif order == "postorder":
            stack = list(reversed(forest))
            visited: Set[str] = set()
            while stack:
                node = stack[-1]
                if node.children and node.node_id not in visited:
                    visited.add(node.node_id)
                    stack.extend(reversed(node.children))
                else:
                    stack.pop()
                    result.append(node)
        elif order == "levelorder":
            queue = deque(forest)
            while queue:
                node = queue.popleft()
                result.append(node)
                queue.extend(node.children)
        else:
            raise ValueError(f"不支持的遍历顺序: {order}")

        return result

    # ===== 写入 =====

    def create_node(self, name: str, parent_id: Optional[str] = None) -> NodeRecord:
        """创建节点（名称已由调用方验证）"""
        record = self._store.insert(name, parent_id)
        logger.debug(f"创建节点: {record.node_id} ({name}), 父节点: {parent_id}")
        return record

    def rename_node(self, node_id: str, name: str) -> NodeRecord:
        """重命名节点，不存在时抛出 NodeNotFoundError"""
        record = self._store.update_name(node_id, name)
        if record is None:
            raise NodeNotFoundError(node_id)
        return record

    def plan_deletion(self, node_id: str) -> Set[str]:
        """计算删除节点时需要一起删除的ID集合"""
        return self._planner.plan(node_id)

    def delete_node(self, node_id: str) -> Set[str]:
        """
        删除节点及其全部后代

        先完整规划删除集合，再一次性批量删除；
        规划失败时不执行任何删除。目标不存在时删除为空操作。

        Returns:
            规划的删除集合
        """
        to_delete = self.plan_deletion(node_id)
        deleted = self._store.bulk_delete(to_delete)
        logger.debug(f"删除子树: {node_id}, 规划 {len(to_delete)} 个, 实际删除 {deleted} 个")
        return to_delete
