"""
核心模块包
包含节点实体、森林组装和子树删除规划
"""

from .node import (
    NodeRecord,
    TreeNode,
    NodeFactory,
    TreeAssembler,
    SubtreeDeletionPlanner,
    NodeRepository,
    assemble,
    plan_deletion,
)

__all__ = [
    'NodeRecord',
    'TreeNode',
    'NodeFactory',
    'TreeAssembler',
    'SubtreeDeletionPlanner',
    'NodeRepository',
    'assemble',
    'plan_deletion',
]
