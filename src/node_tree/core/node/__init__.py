"""
节点模块 - 节点记录、森林组装、子树删除规划
"""

from .entity import NodeRecord, TreeNode
from .factory import NodeFactory, generate_node_id
from .assembler import TreeAssembler, assemble, count_nodes, forest_depth
from .deletion import SubtreeDeletionPlanner, plan_deletion
from .repository import NodeRepository

__all__ = [
    'NodeRecord',
    'TreeNode',
    'NodeFactory',
    'generate_node_id',
    'TreeAssembler',
    'assemble',
    'count_nodes',
    'forest_depth',
    'SubtreeDeletionPlanner',
    'plan_deletion',
    'NodeRepository',
]
