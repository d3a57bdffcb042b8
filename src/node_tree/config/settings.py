"""
系统配置设置
"""
import os
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional

from ..exceptions import ConfigError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_STORAGE_BACKENDS = ["memory", "json", "sqlite"]


@dataclass
class SystemSettings:
    """
    系统配置类
    使用dataclass确保配置的类型安全
    """

    # 系统基本配置
    system_name: str = "node_tree"
    version: str = "1.0.0"

    # 日志配置
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 存储配置
    storage_backend: str = "memory"  # memory, json, sqlite
    storage_path: Optional[str] = None

    # 节点名称规则
    name_min_length: int = 2
    name_max_length: int = 100

    # 导入配置
    import_max_depth: int = 50
    import_indent_width: int = 2

    def __post_init__(self):
        """初始化后处理，验证配置"""
        self.log_level = self.log_level.upper()
        self.storage_backend = self.storage_backend.lower()
        self._validate_settings()
        self._set_defaults()

    def _validate_settings(self):
        """验证配置值"""
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigError(
                message=f"无效的日志级别: {self.log_level}",
                config_key="log_level"
            )

        if self.storage_backend not in VALID_STORAGE_BACKENDS:
            raise ConfigError(
                message=f"无效的存储后端: {self.storage_backend}",
                config_key="storage_backend"
            )

        if self.name_min_length < 1 or self.name_max_length < self.name_min_length:
            raise ConfigError(
                message=f"名称长度范围无效: {self.name_min_length}-{self.name_max_length}",
                config_key="name_min_length"
            )

        if self.import_max_depth < 1:
            raise ConfigError(
                message=f"导入最大深度必须大于0: {self.import_max_depth}",
                config_key="import_max_depth"
            )

        if self.import_indent_width < 1:
            raise ConfigError(
                message=f"缩进宽度必须大于0: {self.import_indent_width}",
                config_key="import_indent_width"
            )

    def _set_defaults(self):
        """设置默认存储路径"""
        if self.storage_backend in ["json", "sqlite"] and not self.storage_path:
            suffix = 'json' if self.storage_backend == 'json' else 'db'
            self.storage_path = os.path.join(
                os.getcwd(),
                "data",
                f"{self.system_name.lower().replace(' ', '_')}.{suffix}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SystemSettings':
        """从字典创建配置"""
        # 过滤无效的配置键
        valid_keys = {f.name for f in fields(cls)}
        filtered_config = {k: v for k, v in config_dict.items() if k in valid_keys}

        return cls(**filtered_config)

    @classmethod
    def from_env(cls, prefix: str = "NODE_TREE_", environ: Optional[Dict[str, str]] = None) -> 'SystemSettings':
        """
        从环境变量创建配置

        变量名为 前缀 + 字段名大写，如 NODE_TREE_STORAGE_BACKEND。
        整数字段会做类型转换。
        """
        environ = os.environ if environ is None else environ
        config: Dict[str, Any] = {}

        for f in fields(cls):
            raw = environ.get(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue

            if f.type is int or f.type == 'int':
                try:
                    config[f.name] = int(raw)
                except ValueError:
                    raise ConfigError(
                        message=f"配置项必须是整数: {f.name}={raw}",
                        config_key=f.name
                    )
            else:
                config[f.name] = raw

        return cls(**config)
