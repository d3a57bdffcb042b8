"""
树节点实体模块
定义扁平节点记录（持久化形态）和组装后的树节点（内存视图）
"""

from collections import deque
from typing import Optional, Dict, Any, List, Union


class NodeRecord:
    """
    扁平节点记录 - 存储层中的一行

    每条记录只通过 parent_id 引用父节点，parent_id 为 None 表示根节点。
    """

    __slots__ = ('node_id', 'name', 'parent_id')

    def __init__(self, node_id: str, name: str, parent_id: Optional[str] = None):
        self.node_id = node_id
        self.name = name
        self.parent_id = parent_id

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_dict(self) -> Dict[str, Any]:
        """序列化为字典"""
        return {
            'node_id': self.node_id,
            'name': self.name,
            'parent_id': self.parent_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NodeRecord':
        """从字典创建记录，空字符串的 parent_id 视为 None"""
        return cls(
            node_id=data['node_id'],
            name=data['name'],
            parent_id=data.get('parent_id') or None
        )

    @classmethod
    def coerce(cls, value: Union['NodeRecord', Dict[str, Any]]) -> 'NodeRecord':
        """接受 NodeRecord 或字典"""
        if isinstance(value, cls):
            return value
        return cls.from_dict(value)

    def __repr__(self) -> str:
        return f"NodeRecord({self.node_id!r}, name={self.name!r}, parent={self.parent_id!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, NodeRecord):
            return False
        return self.node_id == other.node_id

    def __hash__(self) -> int:
        return hash(self.node_id)


class TreeNode:
    """
    树节点 - 组装后的内存视图

    包含记录的全部标量字段，外加 children 列表。
    子节点只归属于其父节点，不保存指向父节点的引用（parent_id 已足够）。
    每次读取请求都重新组装，没有独立的持久化身份。
    """

    def __init__(self, node_id: str, name: str, parent_id: Optional[str] = None):
        """
        初始化树节点

        Args:
            node_id: 节点唯一标识
            name: 节点名称
            parent_id: 父节点ID，None表示根节点
        """
        self.node_id = node_id
        self.name = name
        self.parent_id = parent_id
        self.children: List['TreeNode'] = []

    @classmethod
    def from_record(cls, record: NodeRecord) -> 'TreeNode':
        """复制记录的标量字段，children 为空"""
        return cls(record.node_id, record.name, record.parent_id)

    # ========== 树结构管理 ==========

    def add_child(self, child_node: 'TreeNode') -> None:
        """添加子节点"""
        self.children.append(child_node)

    def get_descendants(self) -> List['TreeNode']:
        """获取所有后代节点（按层序，不含自身）"""
        descendants = []
        queue = deque(self.children)
        while queue:
            node = queue.popleft()
            descendants.append(node)
            queue.extend(node.children)
        return descendants

    def count(self) -> int:
        """子树节点总数（含自身）"""
        return 1 + len(self.get_descendants())

    def find_child_by_name(self, name: str) -> Optional['TreeNode']:
        for child in self.children:
            if child.name == name:
                return child
        return None

    # ========== 序列化 ==========

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        """
        序列化节点

        Args:
            include_children: 是否嵌套输出整棵子树

        Returns:
            可JSON序列化的字典
        """
        result = {
            'node_id': self.node_id,
            'name': self.name,
            'parent_id': self.parent_id,
        }
        if not include_children:
            return result

        # 显式栈，避免深树递归；逆序入栈以保持子节点原始顺序
        result['children'] = []
        stack = [(child, result['children']) for child in reversed(self.children)]
        while stack:
            node, siblings = stack.pop()
            node_dict = {
                'node_id': node.node_id,
                'name': node.name,
                'parent_id': node.parent_id,
                'children': [],
            }
            siblings.append(node_dict)
            stack.extend((child, node_dict['children']) for child in reversed(node.children))

        return result

    # ========== 特殊方法 ==========

    def __repr__(self) -> str:
        return f"TreeNode({self.name}, id={self.node_id}, children={len(self.children)})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeNode):
            return False
        return self.node_id == other.node_id

    def __hash__(self) -> int:
        return hash(self.node_id)
