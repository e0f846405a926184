"""FAQ 分类服务

分类是扁平的顺序集合，order 在集合内保持 1..N 连续。
"""

import uuid
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from ycms.cascade import CascadeResolver
from ycms.config import TreeSettings
from ycms.exceptions import Err, ErrorCode
from ycms.log import get_logger
from ycms.sortable import sequential
from ycms.store import BatchCommitCoordinator, DocumentStore
from ycms.tree import CategoryRecord, FaqRecord, OrderUpdate

logger = get_logger()


class CategoryService:
    """FAQ 分类服务

    使用示例:
        service = CategoryService(store)
        general = service.create_category({"ko": "일반"})
        service.update_category(general.id, order=1)
        service.reorder(["c3", "c1", "c2"])
    """

    def __init__(self, store: DocumentStore, settings: Optional[TreeSettings] = None):
        self.store = store
        self.settings = settings or TreeSettings()
        self.resolver = CascadeResolver(store, self.settings)

    @property
    def collection(self) -> str:
        return self.settings.categories_collection

    def list_categories(self) -> List[CategoryRecord]:
        """按 order 排序的全部分类"""
        items = self.store.list_records(CategoryRecord, collection=self.collection)
        return sorted(items, key=lambda c: c.order)

    def get_category(self, category_id: str) -> CategoryRecord:
        category = self.store.get_record(CategoryRecord, category_id, collection=self.collection)
        if category is None:
            raise Err.not_found(
                f"分类不存在: {category_id}",
                code=ErrorCode.CATEGORY_NOT_FOUND,
                category_id=category_id,
            )
        return category

    def create_category(
        self,
        name: Dict[str, str],
        order: Optional[int] = None,
        description: Optional[Dict[str, str]] = None,
        enabled: Optional[Dict[str, bool]] = None,
        category_id: Optional[str] = None,
    ) -> CategoryRecord:
        """创建分类，order 为空时追加到末尾，否则其后的分类依次后移"""
        if not (name or {}).get("ko"):
            raise Err.invalid("分类名称 name.ko 不能为空", code=ErrorCode.INVALID_PARAMETER)

        order, shifts = sequential.plan_insert(self.list_categories(), order)

        values: Dict[str, Any] = dict(
            id=category_id or uuid.uuid4().hex,
            name=name,
            order=order,
            description=description,
        )
        if enabled is not None:
            values["enabled"] = enabled
        try:
            category = CategoryRecord(**values)
        except PydanticValidationError as e:
            raise Err.from_pydantic(e, "分类数据不合法") from e

        batch = BatchCommitCoordinator(self.store)
        batch.set(self.collection, category.id, category.to_document())
        batch.apply_order_updates(self.collection, shifts)
        batch.commit()

        logger.info(f"创建分类: {category.id} order={order}")
        return category

    def update_category(self, category_id: str, order: Optional[int] = None, **fields: Any) -> CategoryRecord:
        """更新分类

        order 变化时，区间内其他分类在同一批次中移动。
        """
        if "id" in fields:
            raise Err.invalid("分类ID不能修改", code=ErrorCode.INVALID_PARAMETER)

        items = self.list_categories()
        category = next((c for c in items if c.id == category_id), None)
        if category is None:
            raise Err.not_found(
                f"分类不存在: {category_id}",
                code=ErrorCode.CATEGORY_NOT_FOUND,
                category_id=category_id,
            )

        try:
            updated = CategoryRecord.model_validate({**category.model_dump(), **fields})
        except PydanticValidationError as e:
            raise Err.from_pydantic(e, "分类数据不合法", category_id=category_id) from e
        if not updated.name.get("ko"):
            raise Err.invalid("分类名称 name.ko 不能为空", code=ErrorCode.INVALID_PARAMETER)

        batch = BatchCommitCoordinator(self.store)

        old_doc = category.to_document()
        new_doc = updated.to_document()
        changes = {k: v for k, v in new_doc.items() if k != "order" and old_doc.get(k) != v}
        cleared = [k for k in old_doc if k not in new_doc]
        if changes or cleared:
            batch.patch(self.collection, category_id, changes, cleared)

        if order is not None:
            shifts = sequential.set_order(items, category_id, order)
            batch.apply_order_updates(self.collection, shifts)
            updated = updated.model_copy(update={"order": order})

        if batch.commit():
            logger.info(f"更新分类: {category_id}")
        return updated

    def delete_category(self, category_id: str) -> List[OrderUpdate]:
        """删除分类并关闭排序空位

        Raises:
            ResourceConflictException: 仍有 FAQ 使用该分类
        """
        items = self.list_categories()
        if all(c.id != category_id for c in items):
            raise Err.not_found(
                f"分类不存在: {category_id}",
                code=ErrorCode.CATEGORY_NOT_FOUND,
                category_id=category_id,
            )

        faqs = self.store.list_records(
            FaqRecord, {"categoryId": category_id}, collection=self.settings.faqs_collection
        )
        if faqs:
            raise Err.conflict(
                "该分类下仍有 FAQ，不能删除",
                code=ErrorCode.CATEGORY_IN_USE,
                category_id=category_id,
                faq_count=len(faqs),
            )

        shifts = self.resolver.on_category_deleted(items, category_id)

        batch = BatchCommitCoordinator(self.store)
        batch.delete(self.collection, category_id)
        batch.apply_order_updates(self.collection, shifts)
        batch.commit()

        logger.info(f"删除分类: {category_id}，后移 {len(shifts)} 个分类")
        return shifts

    def reorder(self, ids: Sequence[str]) -> List[OrderUpdate]:
        """按给定顺序重新编号全部分类"""
        updates = sequential.reorder_by_ids(self.list_categories(), ids)
        BatchCommitCoordinator(self.store).apply_order_updates(self.collection, updates).commit()
        return updates


__all__ = ["CategoryService"]
