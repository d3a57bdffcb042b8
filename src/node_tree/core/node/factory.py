"""
节点工厂 - 生成节点ID，从原始数据创建记录
"""
import uuid
from typing import Dict, Any, List

from ...exceptions import ValidationError
from .entity import NodeRecord


def generate_node_id() -> str:
    """生成唯一的节点ID"""
    return uuid.uuid4().hex


class NodeFactory:
    """节点工厂，负责把外部数据转换为 NodeRecord"""

    required_fields = ("node_id", "name")

    def create_record_from_dict(self, data: Dict[str, Any]) -> NodeRecord:
        """
        从字典创建记录

        Args:
            data: 至少包含 node_id 和 name 的字典

        Returns:
            创建的记录；缺失或为空的 parent_id 视为根节点
        """
        for field in self.required_fields:
            value = data.get(field)
            if value is None or str(value).strip() == "":
                raise ValidationError(
                    message=f"缺少必需字段: {field}",
                    field=field,
                    reason="required_field_missing"
                )

        parent_id = data.get("parent_id")
        if parent_id is not None:
            parent_id = str(parent_id).strip() or None

        return NodeRecord(
            node_id=str(data["node_id"]).strip(),
            name=str(data["name"]),
            parent_id=parent_id
        )

    def create_records(self, rows: List[Dict[str, Any]]) -> List[NodeRecord]:
        """批量创建记录"""
        return [self.create_record_from_dict(row) for row in rows]
