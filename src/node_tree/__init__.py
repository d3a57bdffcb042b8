"""
节点树系统 - 扁平父引用记录与任意深度层级
"""

__version__ = "1.0.0"

from .system import NodeTreeSystem
from .core.node import assemble, plan_deletion

__all__ = ['NodeTreeSystem', 'assemble', 'plan_deletion']
