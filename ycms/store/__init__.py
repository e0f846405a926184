"""文档存储模块

使用示例:
    from ycms.store import MemoryDocumentStore, BatchCommitCoordinator

    store = MemoryDocumentStore()
    BatchCommitCoordinator(store).set("menus", "A", {"parentId": "0", "depth": 1, "order": 1}).commit()
"""

from .base import (
    MutationOp,
    Mutation,
    StoredDocument,
    DocumentStore,
    BatchCommitCoordinator,
)
from .memory import MemoryDocumentStore
from .sql import SqlDocumentStore, DocumentRow, create_store_engine

__all__ = [
    "MutationOp",
    "Mutation",
    "StoredDocument",
    "DocumentStore",
    "BatchCommitCoordinator",
    "MemoryDocumentStore",
    "SqlDocumentStore",
    "DocumentRow",
    "create_store_engine",
]
