"""
节点树系统异常体系
"""
from datetime import datetime
from typing import Dict, Any, Optional


class BaseError(Exception):
    """所有异常的基类"""
    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.context = context or {}
        self.timestamp = datetime.now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典，便于序列化"""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ==================== 配置和验证异常 ====================
class ConfigError(BaseError):
    """配置错误"""
    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, code="CONFIG_ERROR", details=details, **kwargs)


class ValidationError(BaseError):
    """数据验证错误"""
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        reason: Optional[str] = None,
        **kwargs
    ):
        details = {
            "field": field,
            "value": value,
            "reason": reason
        }
        super().__init__(message, code="VALIDATION_ERROR", details=details, **kwargs)


# ==================== 树结构相关异常 ====================
class TreeError(BaseError):
    """树结构错误基类"""
    def __init__(self, message: str, code: str = "TREE_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class NodeError(TreeError):
    """节点操作错误"""
    def __init__(self, message: str, code: str = "NODE_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class NodeNotFoundError(NodeError):
    """节点不存在"""
    def __init__(self, node_id: Optional[str] = None, **kwargs):
        details = {"node_id": node_id} if node_id else {}

        message = "节点不存在"
        if node_id:
            message += f": id={node_id}"

        super().__init__(message, code="NODE_NOT_FOUND", details=details, **kwargs)
        self.node_id = node_id


# ==================== 存储相关异常 ====================
class StorageError(BaseError):
    """存储错误"""
    pass


class DataStoreError(StorageError):
    """数据存储异常"""
    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        store_type: Optional[str] = None,
        code: str = "DATA_STORE_ERROR",
        **kwargs
    ):
        details = {"operation": operation, "store_type": store_type}
        super().__init__(
            message=f"存储错误[{operation or 'unknown'}]: {message}",
            code=code,
            details=details,
            **kwargs
        )
        self.operation = operation
        self.store_type = store_type


class StoreUnavailableError(DataStoreError):
    """存储不可用：读写失败，当前操作中止且不产生部分结果"""
    def __init__(self, message: str, operation: Optional[str] = None,
                 store_type: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            operation=operation,
            store_type=store_type,
            code="STORE_UNAVAILABLE",
            **kwargs
        )


# ==================== 导入导出异常 ====================
class DataImportError(BaseError):
    """导入过程异常"""
    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        details = {"file_path": file_path} if file_path else {}
        super().__init__(message, code="IMPORT_ERROR", details=details, **kwargs)
