"""
节点树系统主入口
集成配置、存储、组装、删除规划与导入导出，提供完整的管理接口
"""

import logging
from typing import Dict, List, Optional, Any

from .config.settings import SystemSettings
from .config.validator import ConfigValidator
from .core.node import NodeRepository, TreeNode, count_nodes, forest_depth
from .data.storage import RecordStoreAdapter, create_store
from .exceptions import BaseError, ValidationError
from .services.import_export.outline_importer import OutlineImporter
from .services.import_export.table_importer import RecordTableImporter
from .services.import_export.exporter import export_records

PACKAGE_LOGGER = 'node_tree'

IMPORT_FORMATS = {
    'outline': OutlineImporter,
    'records': RecordTableImporter,
}


class NodeTreeSystem:
    """
    节点树系统主类

    对应原有的四个接口：
        读取整棵树   -> get_tree()
        创建节点     -> create_node(name, parent_id)
        重命名节点   -> update_node(node_id, name)
        删除子树     -> delete_node(node_id)
    名称验证在这里完成，核心算法本身不做输入验证。
    """

    def __init__(
            self,
            config: Optional[Dict[str, Any]] = None,
            storage: Optional[RecordStoreAdapter] = None
    ):
        """
        初始化系统

        Args:
            config: 系统配置字典
            storage: 存储适配器（默认按配置创建，配置缺省为 MemoryStore）
        """
        # 加载配置
        if config:
            ConfigValidator().validate_system_config(config)
        self.settings = SystemSettings.from_dict(config) if config else SystemSettings()
        self.validator = ConfigValidator(
            name_min_length=self.settings.name_min_length,
            name_max_length=self.settings.name_max_length
        )

        # 初始化日志
        self._setup_logging()
        self.logger = logging.getLogger(__name__)

        # 存储适配器
        self._storage = storage or self._create_storage()
        self.logger.info(f"使用存储引擎: {self._storage.__class__.__name__}")

        self.repository = NodeRepository(self._storage)
        self.logger.info(f"{self.settings.system_name} 初始化完成")

    def _setup_logging(self):
        """配置日志系统"""
        level = getattr(logging, self.settings.log_level)
        logging.basicConfig(
            level=level,
            format=self.settings.log_format,
            handlers=[logging.StreamHandler()]
        )

        # 根日志已被宿主配置时 basicConfig 不生效，文件日志直接挂到包日志上
        self._file_handler: Optional[logging.Handler] = None
        if self.settings.log_file:
            package_logger = logging.getLogger(PACKAGE_LOGGER)
            self._file_handler = logging.FileHandler(self.settings.log_file, encoding='utf-8')
            self._file_handler.setFormatter(logging.Formatter(self.settings.log_format))
            self._file_handler.setLevel(level)
            package_logger.addHandler(self._file_handler)
            if package_logger.level == logging.NOTSET or package_logger.level > level:
                package_logger.setLevel(level)

    def _create_storage(self) -> RecordStoreAdapter:
        """根据配置创建存储"""
        backend = self.settings.storage_backend
        if backend == 'json':
            return create_store(backend, file_path=self.settings.storage_path)
        if backend == 'sqlite':
            return create_store(backend, db_path=self.settings.storage_path)
        return create_store(backend)

    @property
    def storage(self) -> RecordStoreAdapter:
        return self._storage

    # ========== 读取 ==========

    def get_forest(self) -> List[TreeNode]:
        """读取并组装森林（TreeNode 对象）"""
        try:
            return self.repository.get_tree()
        except BaseError as e:
            self.logger.error(f"读取树失败: {e}")
            raise

    def get_tree(self) -> List[Dict[str, Any]]:
        """读取整棵树，返回嵌套字典列表"""
        return [root.to_dict() for root in self.get_forest()]

    def get_node(self, node_id: str) -> Dict[str, Any]:
        """读取单个节点记录"""
        return self.repository.get_node(node_id).to_dict()

    # ========== 写入 ==========

    def create_node(self, name: Any, parent_id: Optional[str] = None) -> Dict[str, Any]:
        """
        创建节点

        Args:
            name: 节点名称，去除首尾空白后至少 name_min_length 个字符
            parent_id: 父节点ID，None 或空字符串表示根节点

        Returns:
            新建节点的记录字典

        Raises:
            ValidationError: 名称无效
            NodeNotFoundError: 父节点不存在
        """
        try:
            clean_name = self.validator.validate_node_name(name)
            record = self.repository.create_node(clean_name, parent_id or None)
        except ValidationError as e:
            self.logger.warning(f"创建节点被拒绝: {e}")
            raise
        except BaseError as e:
            self.logger.error(f"创建节点失败: {e}")
            raise

        self.logger.info(f"创建节点成功: {record.node_id} ({record.name})")
        return record.to_dict()

    def update_node(self, node_id: str, name: Any) -> Dict[str, Any]:
        """
        重命名节点

        Raises:
            ValidationError: 名称无效
            NodeNotFoundError: 节点不存在
        """
        try:
            clean_name = self.validator.validate_node_name(name)
            record = self.repository.rename_node(node_id, clean_name)
        except ValidationError as e:
            self.logger.warning(f"重命名节点被拒绝: {e}")
            raise
        except BaseError as e:
            self.logger.error(f"重命名节点失败: {node_id}, 错误: {e}")
            raise

        self.logger.info(f"重命名节点成功: {node_id} -> {record.name}")
        return record.to_dict()

    def delete_node(self, node_id: str) -> Dict[str, Any]:
        """
        删除节点及其全部后代

        目标不存在时同样成功，删除为空操作。

        Returns:
            {'message': 'Node deleted', 'deleted_ids': [...]}
        """
        try:
            deleted_ids = self.repository.delete_node(node_id)
        except BaseError as e:
            self.logger.error(f"删除节点失败: {node_id}, 错误: {e}")
            raise

        self.logger.info(f"删除节点成功: {node_id}, 共 {len(deleted_ids)} 个")
        return {
            'message': 'Node deleted',
            'deleted_ids': sorted(deleted_ids)
        }

    # ========== 导入导出 ==========

    def import_file(
            self,
            file_path: str,
            file_format: str = 'outline',
            parent_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        从表格文件导入节点

        Args:
            file_path: .xlsx/.xls/.csv 文件路径
            file_format: 'outline'（缩进大纲）或 'records'（node_id/name/parent_id 表）
            parent_id: 大纲顶层行挂接的父节点
        """
        importer_class = IMPORT_FORMATS.get(file_format)
        if importer_class is None:
            raise ValidationError(
                message=f"不支持的导入格式: {file_format}",
                field="file_format",
                value=file_format,
                reason=f"必须是 {list(IMPORT_FORMATS)} 之一"
            )

        importer = importer_class(
            self.repository,
            config={
                'indent_width': self.settings.import_indent_width,
                'max_depth': self.settings.import_max_depth,
                'parent_id': parent_id
            },
            name_validator=self.validator.validate_node_name
        )

        try:
            created = importer.import_data(file_path)
        except BaseError as e:
            self.logger.error(f"导入失败: {file_path}, 错误: {e}")
            raise

        return {
            'success': True,
            'created': [record.to_dict() for record in created],
            'stats': dict(importer.stats)
        }

    def export_file(self, file_path: str) -> int:
        """导出全部记录为 CSV/Excel，返回记录数"""
        count = export_records(self._storage, file_path)
        self.logger.info(f"导出 {count} 条记录到 {file_path}")
        return count

    # ========== 统计 ==========

    def get_stats(self) -> Dict[str, Any]:
        """获取系统统计信息"""
        forest = self.get_forest()
        return {
            'system_name': self.settings.system_name,
            'storage': self._storage.store_type,
            'node_count': self._storage.count(),
            'reachable_count': count_nodes(forest),
            'root_count': len(forest),
            'tree_depth': forest_depth(forest),
        }

    def close(self):
        """关闭存储并卸下文件日志"""
        self._storage.close()
        if self._file_handler is not None:
            logging.getLogger(PACKAGE_LOGGER).removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
