"""文档存储接口与批量提交协调器

DocumentStore 是核心依赖的外部协作方，只需要提供:
    - 快照读取: list_documents(collection, filters)
    - 批量写入: commit(mutations)，要么全部可见，要么全部不可见
    - 依赖查找: find_by_foreign_key(collection, field, value)

使用示例:
    from ycms.store import BatchCommitCoordinator, MemoryDocumentStore

    store = MemoryDocumentStore()
    batch = BatchCommitCoordinator(store)
    batch.apply_node_updates("menus", updates)
    batch.delete("pages", "p1")
    batch.commit()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Type, TypeVar, Union

from ycms.exceptions import Err
from ycms.log import get_logger
from ycms.tree.models import NodeUpdate, OrderUpdate, Record

logger = get_logger()

R = TypeVar("R", bound=Record)


class MutationOp(str, Enum):
    """写入操作类型"""

    SET = "set"          # 整体写入（不存在则创建）
    UPDATE = "update"    # 合并字段，文档必须存在
    DELETE = "delete"    # 删除，不存在时忽略


@dataclass(frozen=True)
class Mutation:
    """单条文档写入：{collection, id, fields}"""

    collection: str
    doc_id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    op: MutationOp = MutationOp.UPDATE

    @classmethod
    def set(cls, collection: str, doc_id: str, data: Dict[str, Any]) -> "Mutation":
        return cls(collection, doc_id, dict(data), MutationOp.SET)

    @classmethod
    def update(cls, collection: str, doc_id: str, fields: Dict[str, Any]) -> "Mutation":
        return cls(collection, doc_id, dict(fields), MutationOp.UPDATE)

    @classmethod
    def delete(cls, collection: str, doc_id: str) -> "Mutation":
        return cls(collection, doc_id, {}, MutationOp.DELETE)


class StoredDocument(NamedTuple):
    id: str
    data: Dict[str, Any]


def matches(data: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    """字段相等过滤"""
    if not filters:
        return True
    return all(data.get(key) == value for key, value in filters.items())


class DocumentStore(ABC):
    """文档存储抽象基类

    子类实现 get / list_documents / commit 三个方法即可。
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """读取单个文档，不存在返回 None"""

    @abstractmethod
    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[StoredDocument]:
        """读取集合中的文档（无序），可按字段相等过滤"""

    @abstractmethod
    def commit(self, mutations: List[Mutation]) -> None:
        """原子地应用一批写入

        Raises:
            BatchCommitException: 任意一条写入失败，整批都不生效
        """

    def find_by_foreign_key(self, collection: str, field_name: str, value: Any) -> List[StoredDocument]:
        """查找 field_name == value 的文档"""
        return self.list_documents(collection, {field_name: value})

    def list_records(
        self,
        record_cls: Type[R],
        filters: Optional[Dict[str, Any]] = None,
        collection: Optional[str] = None,
    ) -> List[R]:
        """读取并转换为记录模型"""
        collection = collection or record_cls.__collection__
        return [record_cls.from_document(doc.id, doc.data) for doc in self.list_documents(collection, filters)]

    def get_record(self, record_cls: Type[R], doc_id: str, collection: Optional[str] = None) -> Optional[R]:
        data = self.get(collection or record_cls.__collection__, doc_id)
        if data is None:
            return None
        return record_cls.from_document(doc_id, data)


class BatchCommitCoordinator:
    """批量提交协调器

    收集规划器和级联解析器产生的更新，一次性提交给存储。
    提交失败时抛出的 BatchCommitException 原样向上传播，不会自动重试：
    调用方应重新读取快照并重新规划。
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self._pending: List[Mutation] = []

    @property
    def pending(self) -> List[Mutation]:
        return list(self._pending)

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, mutation: Mutation) -> "BatchCommitCoordinator":
        self._pending.append(mutation)
        return self

    def extend(self, mutations: Iterable[Mutation]) -> "BatchCommitCoordinator":
        self._pending.extend(mutations)
        return self

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> "BatchCommitCoordinator":
        return self.add(Mutation.set(collection, doc_id, data))

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> "BatchCommitCoordinator":
        return self.add(Mutation.update(collection, doc_id, fields))

    def delete(self, collection: str, doc_id: str) -> "BatchCommitCoordinator":
        return self.add(Mutation.delete(collection, doc_id))

    def patch(
        self,
        collection: str,
        doc_id: str,
        changes: Dict[str, Any],
        cleared: Iterable[str] = (),
    ) -> "BatchCommitCoordinator":
        """写入字段变更，cleared 中的字段从文档中移除

        UPDATE 只能合并字段，有字段需要移除时读取当前文档并整体 SET。
        """
        cleared = set(cleared)
        if not cleared:
            return self.update(collection, doc_id, changes)
        current = self.store.get(collection, doc_id)
        if current is None:
            raise Err.batch(f"文档不存在: {collection}/{doc_id}", collection=collection, doc_id=doc_id)
        document = {k: v for k, v in current.items() if k not in cleared}
        document.update(changes)
        return self.set(collection, doc_id, document)

    def apply_node_updates(
        self,
        collection: str,
        updates: Iterable[Union[NodeUpdate, OrderUpdate]],
    ) -> "BatchCommitCoordinator":
        """把规划器输出转换为字段更新"""
        for upd in updates:
            self.update(collection, upd.id, upd.to_fields())
        return self

    def apply_order_updates(self, collection: str, updates: Iterable[OrderUpdate]) -> "BatchCommitCoordinator":
        return self.apply_node_updates(collection, updates)

    def commit(self) -> int:
        """提交全部待写入，返回写入条数

        Raises:
            BatchCommitException: 存储未能原子地应用本批次
        """
        mutations, self._pending = self._pending, []
        if not mutations:
            return 0
        try:
            self.store.commit(mutations)
        except Exception as e:
            logger.warning(f"批量提交失败（{len(mutations)} 条）: {e}")
            raise
        logger.debug(f"批量提交成功: {len(mutations)} 条")
        return len(mutations)


__all__ = [
    "MutationOp",
    "Mutation",
    "StoredDocument",
    "DocumentStore",
    "BatchCommitCoordinator",
    "matches",
]
