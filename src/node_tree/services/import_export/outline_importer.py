"""
大纲导入器
从单列缩进表格（Excel/CSV）构建节点层级，每级缩进若干空格
"""
from typing import Dict, List, Any, Optional, Tuple

from node_tree.core.node import NodeRecord
from node_tree.exceptions import DataImportError

from .base_importer import DataImporter, read_table

# 识别名称列时匹配的列名关键字
NAME_COLUMN_KEYWORDS = ('name', '名称', '节点')


class OutlineImporter(DataImporter):
    """
    大纲导入器

    表格示例（name 列，每级缩进 2 个空格）：

        华东
          上海
            浦东
          杭州
        华南

    某行的父节点是它之前最近的、层级更低的行。
    配置项：
        name_column: 名称列，默认按关键字查找，找不到用第一列
        indent_width: 每级缩进的空格数，默认 2
        max_depth: 层级上限，超过按上限处理，默认 50
        parent_id: 顶层行挂接的父节点ID，默认 None（作为根）
    """

    def _validate_config(self):
        self.indent_width = int(self.config.get('indent_width', 2))
        self.max_depth = int(self.config.get('max_depth', 50))
        if self.indent_width < 1:
            raise DataImportError(f"缩进宽度必须大于0: {self.indent_width}")
        if self.max_depth < 1:
            raise DataImportError(f"最大深度必须大于0: {self.max_depth}")

    def parse_level(self, raw_name: str) -> int:
        """根据前导空白解析层级，制表符按缩进宽度展开"""
        expanded = raw_name.expandtabs(self.indent_width)
        leading_spaces = len(expanded) - len(expanded.lstrip(' '))
        return min(leading_spaces // self.indent_width, self.max_depth)

    def _find_name_column(self, columns: List[str]) -> str:
        configured = self.config.get('name_column')
        if configured:
            if configured not in columns:
                raise DataImportError(f"未找到名称列: {configured}")
            return configured

        for col in columns:
            if any(keyword in str(col).lower() for keyword in NAME_COLUMN_KEYWORDS):
                return col

        if not columns:
            raise DataImportError("表格没有任何列")
        return columns[0]

    def parse_data(self, file_path: str) -> List[Dict[str, Any]]:
        """
        解析大纲

        Returns:
            [{'row_index', 'raw_name', 'name', 'level', 'parent_index'}]
            parent_index 为父行在结果中的下标，顶层为 None
        """
        df = read_table(file_path)
        name_column = self._find_name_column(list(df.columns))

        parsed: List[Dict[str, Any]] = []
        hierarchy: List[Tuple[int, int]] = []  # (level, 结果下标)

        for row_index, raw_value in enumerate(df[name_column].tolist()):
            raw_name = str(raw_value).rstrip()
            if not raw_name.strip():
                continue

            level = self.parse_level(raw_name)

            # 弹出层级不低于当前行的祖先
            while hierarchy and hierarchy[-1][0] >= level:
                hierarchy.pop()
            parent_index = hierarchy[-1][1] if hierarchy else None

            parsed.append({
                'row_index': row_index,
                'raw_name': raw_name,
                'name': raw_name.strip(),
                'level': level,
                'parent_index': parent_index
            })
            hierarchy.append((level, len(parsed) - 1))

        return parsed

    def convert_to_records(self, data: List[Dict[str, Any]]) -> List[NodeRecord]:
        """先验证全部名称，再按行顺序写入，父行总在子行之前"""
        top_parent: Optional[str] = self.config.get('parent_id')
        names = [self.name_validator(item['name']) for item in data]
        created: List[NodeRecord] = []

        for item, name in zip(data, names):
            if item['parent_index'] is None:
                parent_id = top_parent
            else:
                parent_id = created[item['parent_index']].node_id

            created.append(self.repository.create_node(name, parent_id))

        return created
