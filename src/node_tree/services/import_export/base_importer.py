"""
数据导入器基类
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Any, Optional

import pandas as pd

from node_tree.core.node import NodeRecord, NodeRepository
from node_tree.exceptions import DataImportError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {'.xlsx', '.xls'}
CSV_SUFFIXES = {'.csv'}
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES | CSV_SUFFIXES


def read_table(file_path: str) -> pd.DataFrame:
    """
    读取表格文件，所有单元格按字符串读取，空单元格为空字符串

    Args:
        file_path: .xlsx/.xls/.csv 文件路径
    """
    suffix = Path(file_path).suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            return pd.read_excel(file_path, dtype=str, keep_default_na=False)
        if suffix in CSV_SUFFIXES:
            return pd.read_csv(file_path, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        raise DataImportError(f"读取文件失败: {e}", file_path=file_path) from e

    raise DataImportError(f"不支持的文件类型: {suffix}", file_path=file_path)


class DataImporter(ABC):
    """数据导入器抽象基类"""

    def __init__(
        self,
        repository: NodeRepository,
        config: Optional[Dict[str, Any]] = None,
        name_validator: Optional[Callable[[Any], str]] = None
    ):
        """
        Args:
            repository: 写入目标仓库
            config: 导入配置
            name_validator: 名称验证函数，返回清理后的名称；默认只去除首尾空白
        """
        self.repository = repository
        self.config = config or {}
        self.name_validator = name_validator or (lambda name: str(name).strip())
        self.stats = {
            'rows_parsed': 0,
            'nodes_created': 0,
            'skipped': 0
        }
        self._validate_config()

    def _validate_config(self):
        """验证配置参数"""
        pass

    def validate_file(self, file_path: str) -> bool:
        """验证文件是否可导入"""
        path = Path(file_path)
        return path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES

    @abstractmethod
    def parse_data(self, file_path: str) -> List[Dict[str, Any]]:
        """解析数据为标准化格式"""
        pass

    @abstractmethod
    def convert_to_records(self, data: List[Dict[str, Any]]) -> List[NodeRecord]:
        """将解析结果写入仓库，返回新建的记录"""
        pass

    def import_data(self, file_path: str) -> List[NodeRecord]:
        """
        导入数据的完整流程
        1. 验证文件
        2. 解析数据
        3. 写入仓库
        """
        if not self.validate_file(file_path):
            raise DataImportError(f"文件验证失败: {file_path}", file_path=file_path)

        data = self.parse_data(file_path)
        self.stats['rows_parsed'] = len(data)

        created = self.convert_to_records(data)
        self.stats['nodes_created'] = len(created)
        logger.info(
            f"导入完成: {file_path}, 解析 {self.stats['rows_parsed']} 行, "
            f"创建 {self.stats['nodes_created']} 个节点, 跳过 {self.stats['skipped']} 个"
        )
        return created
