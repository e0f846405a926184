"""内存文档存储

批次先作用于集合的深拷贝，全部成功后再整体替换，
失败时原数据不受影响。适合测试和单进程场景。

使用示例:
    store = MemoryDocumentStore({
        "menus": {"A": {"parentId": "0", "depth": 1, "order": 1}},
    })
    store.commit([Mutation.update("menus", "A", {"order": 2})])
"""

import copy
import threading
from typing import Any, Dict, List, Optional

from ycms.exceptions import Err

from .base import DocumentStore, Mutation, MutationOp, StoredDocument, matches

Collections = Dict[str, Dict[str, Dict[str, Any]]]


class MemoryDocumentStore(DocumentStore):
    """基于字典的文档存储"""

    def __init__(self, initial: Optional[Collections] = None):
        self._collections: Collections = copy.deepcopy(initial or {})
        self._lock = threading.RLock()

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(data) if data is not None else None

    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[StoredDocument]:
        with self._lock:
            docs = self._collections.get(collection, {})
            return [
                StoredDocument(doc_id, copy.deepcopy(data))
                for doc_id, data in docs.items()
                if matches(data, filters)
            ]

    def commit(self, mutations: List[Mutation]) -> None:
        with self._lock:
            staged = copy.deepcopy(self._collections)
            for index, mutation in enumerate(mutations):
                self._apply(staged, mutation, index)
            self._collections = staged

    @staticmethod
    def _apply(staged: Collections, mutation: Mutation, index: int) -> None:
        docs = staged.setdefault(mutation.collection, {})
        if mutation.op == MutationOp.SET:
            docs[mutation.doc_id] = copy.deepcopy(mutation.fields)
        elif mutation.op == MutationOp.UPDATE:
            if mutation.doc_id not in docs:
                raise Err.batch(
                    f"文档不存在: {mutation.collection}/{mutation.doc_id}",
                    failed_index=index,
                    collection=mutation.collection,
                    doc_id=mutation.doc_id,
                )
            docs[mutation.doc_id].update(copy.deepcopy(mutation.fields))
        else:
            docs.pop(mutation.doc_id, None)


__all__ = ["MemoryDocumentStore"]
