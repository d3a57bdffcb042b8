"""
记录表导入器
从 node_id / name / parent_id 三列表格导入扁平记录
"""
import logging
from typing import Dict, List, Any, Tuple

from node_tree.core.node import NodeFactory, NodeRecord, TreeAssembler, TreeNode
from node_tree.exceptions import DataImportError

from .base_importer import DataImporter, read_table

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('node_id', 'name')


class RecordTableImporter(DataImporter):
    """
    记录表导入器

    表中的ID只在文件内有效，写入时由存储重新分配ID并重映射父引用。
    先用组装器还原森林，再前序写入，保证父节点先于子节点创建。
    父ID在文件中找不到的行作为根导入；环上的行从任何根都不可达，被跳过。
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._factory = NodeFactory()
        self._assembler = TreeAssembler()

    def parse_data(self, file_path: str) -> List[Dict[str, Any]]:
        df = read_table(file_path)

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise DataImportError(f"缺少必需列: {', '.join(missing)}", file_path=file_path)

        if 'parent_id' not in df.columns:
            df['parent_id'] = ''

        return df[['node_id', 'name', 'parent_id']].to_dict(orient='records')

    def convert_to_records(self, data: List[Dict[str, Any]]) -> List[NodeRecord]:
        records = self._factory.create_records(data)
        forest = self._assembler.assemble(records)

        # 前序遍历并验证名称，任何一行无效都不写入
        ordered: List[Tuple[TreeNode, str]] = []
        stack = list(reversed(forest))
        while stack:
            node = stack.pop()
            ordered.append((node, self.name_validator(node.name)))
            stack.extend(reversed(node.children))

        # 父节点一定先于子节点写入
        id_map: Dict[str, str] = {}
        created: List[NodeRecord] = []
        for node, name in ordered:
            parent_id = id_map.get(node.parent_id) if node.parent_id else None
            record = self.repository.create_node(name, parent_id)
            id_map[node.node_id] = record.node_id
            created.append(record)

        unique_ids = {record.node_id for record in records}
        self.stats['skipped'] = len(unique_ids) - len(created)
        if self.stats['skipped']:
            logger.warning(f"{self.stats['skipped']} 条记录处于环中，无法从根到达，已跳过")

        return created
