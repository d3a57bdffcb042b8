"""
记录导出
将存储中的扁平记录写成 CSV 或 Excel 表格，可被 RecordTableImporter 读回
"""
from pathlib import Path

import pandas as pd

from node_tree.data.storage.adapter import RecordStoreAdapter
from node_tree.exceptions import DataImportError

from .base_importer import CSV_SUFFIXES

EXPORT_COLUMNS = ['node_id', 'name', 'parent_id']


def records_to_frame(store: RecordStoreAdapter) -> pd.DataFrame:
    """全部记录转换为 DataFrame，根节点的 parent_id 为空字符串"""
    rows = [record.to_dict() for record in store.fetch_all()]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    df['parent_id'] = df['parent_id'].fillna('')
    return df


def export_records(store: RecordStoreAdapter, file_path: str) -> int:
    """
    导出记录

    Args:
        store: 节点记录存储
        file_path: 输出路径，后缀决定格式（.csv / .xlsx）

    Returns:
        导出的记录数
    """
    path = Path(file_path)
    suffix = path.suffix.lower()
    df = records_to_frame(store)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix in CSV_SUFFIXES:
            df.to_csv(path, index=False)
        elif suffix == '.xlsx':
            df.to_excel(path, index=False)
        else:
            raise DataImportError(f"不支持的导出类型: {suffix}", file_path=str(path))
    except OSError as e:
        raise DataImportError(f"写入文件失败: {e}", file_path=str(path)) from e

    return len(df)
