"""
数据模块
包含存储后端
"""

from .storage import (
    RecordStoreAdapter,
    MemoryStore,
    JSONStore,
    SQLiteStore,
    create_store
)

__all__ = [
    'RecordStoreAdapter',
    'MemoryStore',
    'JSONStore',
    'SQLiteStore',
    'create_store'
]
