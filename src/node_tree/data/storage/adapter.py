"""
存储适配器接口
定义节点记录存储的统一操作接口
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ...core.node.entity import NodeRecord


class RecordStoreAdapter(ABC):
    """
    节点记录存储抽象基类

    存储只保存扁平记录 {node_id, name, parent_id}。
    插入时检查父节点存在（写入时的引用完整性由存储负责），
    批量删除必须全部成功或全部失败。
    I/O 失败统一抛出 StoreUnavailableError 的子类。
    """

    store_type = "abstract"

    @abstractmethod
    def fetch_all(self) -> List[NodeRecord]:
        """获取全部记录"""
        pass

    @abstractmethod
    def fetch_children(self, parent_id: str) -> List[str]:
        """获取直接子节点ID列表"""
        pass

    @abstractmethod
    def fetch_one(self, node_id: str) -> Optional[NodeRecord]:
        """根据ID获取记录，不存在返回None"""
        pass

    @abstractmethod
    def insert(self, name: str, parent_id: Optional[str] = None) -> NodeRecord:
        """
        插入新记录

        Args:
            name: 节点名称（已由调用方验证）
            parent_id: 父节点ID，None表示根节点

        Returns:
            新建的记录（ID由存储生成）

        Raises:
            NodeNotFoundError: 父节点不存在
        """
        pass

    @abstractmethod
    def update_name(self, node_id: str, name: str) -> Optional[NodeRecord]:
        """
        更新节点名称

        Returns:
            更新后的记录，节点不存在返回None
        """
        pass

    @abstractmethod
    def bulk_delete(self, node_ids: Iterable[str]) -> int:
        """
        批量删除（原子操作）

        Args:
            node_ids: 要删除的ID集合，不存在的ID被忽略

        Returns:
            实际删除的记录数
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """记录总数"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """清空所有数据（测试用）"""
        pass

    def close(self) -> None:
        """关闭存储连接"""
        pass

    def exists(self, node_id: str) -> bool:
        """检查节点是否存在"""
        return self.fetch_one(node_id) is not None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
