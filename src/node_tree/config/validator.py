"""
配置与输入验证器
"""
from typing import Dict, Any, Optional

from ..exceptions import ValidationError
from .settings import VALID_LOG_LEVELS, VALID_STORAGE_BACKENDS


class ConfigValidator:
    """配置验证器，同时负责节点名称的输入验证"""

    def __init__(self, name_min_length: int = 2, name_max_length: int = 100):
        self.name_min_length = name_min_length
        self.name_max_length = name_max_length

    def validate_system_config(self, config: Dict[str, Any]) -> bool:
        """验证系统配置字典"""
        if not isinstance(config, dict):
            raise ValidationError(
                message="配置必须是字典",
                field="config",
                value=config,
                reason="invalid_type"
            )

        backend = config.get('storage_backend', 'memory')
        if str(backend).lower() not in VALID_STORAGE_BACKENDS:
            raise ValidationError(
                message=f"无效的存储后端: {backend}",
                field="storage_backend",
                value=backend,
                reason=f"必须是 {VALID_STORAGE_BACKENDS} 之一"
            )

        if str(backend).lower() in ('json', 'sqlite') and 'storage_path' in config:
            if not self._validate_string(config['storage_path'], min_len=1, max_len=4096):
                raise ValidationError(
                    message="存储路径必须是非空字符串",
                    field="storage_path",
                    value=config['storage_path'],
                    reason="invalid_path"
                )

        level = config.get('log_level', 'INFO')
        if str(level).upper() not in VALID_LOG_LEVELS:
            raise ValidationError(
                message=f"无效的日志级别: {level}",
                field="log_level",
                value=level,
                reason=f"必须是 {VALID_LOG_LEVELS} 之一"
            )

        return True

    def validate_node_name(self, name: Optional[Any]) -> str:
        """
        验证节点名称

        Args:
            name: 用户提交的名称

        Returns:
            去除首尾空白后的名称

        Raises:
            ValidationError: 名称缺失、只含空白或长度不符
        """
        if name is None or (isinstance(name, str) and name == ""):
            raise ValidationError(
                message="Name is required",
                field="name",
                value=name,
                reason="required_field_missing"
            )

        if not isinstance(name, str):
            raise ValidationError(
                message="Name must be a string",
                field="name",
                value=name,
                reason="invalid_type"
            )

        trimmed = name.strip()
        if not trimmed:
            raise ValidationError(
                message="Name cannot contain only spaces",
                field="name",
                value=name,
                reason="blank"
            )

        if len(trimmed) < self.name_min_length:
            raise ValidationError(
                message=f"Name must be at least {self.name_min_length} characters long",
                field="name",
                value=name,
                reason="too_short"
            )

        if len(trimmed) > self.name_max_length:
            raise ValidationError(
                message=f"Name must be at most {self.name_max_length} characters long",
                field="name",
                value=name,
                reason="too_long"
            )

        return trimmed

    def _validate_string(self, value: Any, min_len: int = 1, max_len: int = 100) -> bool:
        """验证字符串"""
        return isinstance(value, str) and min_len <= len(value) <= max_len
