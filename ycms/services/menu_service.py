"""导航菜单服务

把快照读取、规划、级联解析和批量提交串成完整的管理命令。
每个命令只读一次快照，只提交一个批次；任何异常都发生在提交之前。

使用示例:
    from ycms.services import MenuService
    from ycms.store import MemoryDocumentStore

    service = MenuService(MemoryDocumentStore())
    about = service.create_menu("web", {"ko": "소개"}, "/about")
    team = service.create_menu("web", {"ko": "팀"}, "/about/team", parent_id=about.id)
    service.move_menu(team.id, new_parent_id="0", target_index=0)
"""

import uuid
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ycms.cascade import CascadeResolver
from ycms.config import TreeSettings
from ycms.exceptions import Err, ErrorCode
from ycms.log import get_logger
from ycms.sortable import sequential
from ycms.store import BatchCommitCoordinator, DocumentStore
from ycms.tree import (
    ForestNode,
    MenuRecord,
    NodeUpdate,
    OrderUpdate,
    TreeSnapshot,
    build_forest,
    flatten_forest,
    plan_move,
    plan_removal,
)

logger = get_logger()

SITES = ("web", "docs")

# 结构字段只能通过 move_menu 修改
STRUCTURAL_FIELDS = {"parent_id", "parentId", "depth", "order", "site", "id"}


class MenuService:
    """菜单服务

    Args:
        store: 文档存储
        settings: 导航树配置
    """

    def __init__(self, store: DocumentStore, settings: Optional[TreeSettings] = None):
        self.store = store
        self.settings = settings or TreeSettings()
        self.resolver = CascadeResolver(store, self.settings)

    @property
    def collection(self) -> str:
        return self.settings.menus_collection

    # ==================== 查询 ====================

    def snapshot(self, site: str) -> TreeSnapshot:
        """读取某个站点的全部菜单"""
        menus = self.store.list_records(MenuRecord, {"site": site}, collection=self.collection)
        return TreeSnapshot(
            menus,
            root_parent_id=self.settings.root_parent_id,
            max_depth=self.settings.max_depth,
        )

    def get_menu_tree(self, site: str) -> List[ForestNode]:
        snapshot = self.snapshot(site)
        return build_forest(snapshot.nodes, root_parent_id=self.settings.root_parent_id)

    def list_menus(self, site: str) -> List[MenuRecord]:
        """先序排列的菜单列表（父在前，子按 order）"""
        return flatten_forest(self.get_menu_tree(site))

    def get_menu(self, menu_id: str) -> MenuRecord:
        menu = self.store.get_record(MenuRecord, menu_id, collection=self.collection)
        if menu is None:
            raise Err.not_found(f"菜单不存在: {menu_id}", code=ErrorCode.MENU_NOT_FOUND, menu_id=menu_id)
        return menu

    # ==================== 创建 ====================

    def create_menu(
        self,
        site: str,
        labels: Dict[str, str],
        path: str,
        parent_id: Optional[str] = None,
        order: Optional[int] = None,
        page_type: str = "dynamic",
        enabled: Optional[Dict[str, bool]] = None,
        description: Optional[Dict[str, str]] = None,
        menu_id: Optional[str] = None,
    ) -> MenuRecord:
        """创建菜单

        Args:
            site: 站点（web / docs）
            labels: 多语言名称，必须包含 ko
            path: 路径
            parent_id: 父菜单ID，为空表示顶层
            order: 在同级中的位置（1-based），为空则追加到末尾
            page_type: 页面类型
            enabled: 各语言启用状态
            description: 多语言描述
            menu_id: 指定ID，为空则自动生成

        Returns:
            创建的菜单

        Raises:
            ValidationException: 站点、名称或路径不合法，或超过最大层级
            ReferentialIntegrityException: 父菜单不存在
        """
        self._validate_payload(site, labels, path)
        snapshot = self.snapshot(site)

        parent_id = parent_id or self.settings.root_parent_id
        if not snapshot.is_root(parent_id) and parent_id not in snapshot:
            raise Err.integrity(f"父菜单不存在: {parent_id}", parent_id=parent_id)

        depth = snapshot.depth_for_parent(parent_id)
        if depth > self.settings.max_depth:
            raise Err.invalid(
                f"菜单层级不能超过 {self.settings.max_depth}",
                code=ErrorCode.MAX_DEPTH_EXCEEDED,
                parent_id=parent_id,
            )

        shifts: List[OrderUpdate] = []
        if order is None:
            order = snapshot.next_order(parent_id)
        else:
            order, shifts = sequential.plan_insert(snapshot.siblings(parent_id), order)

        values: Dict[str, Any] = dict(
            id=menu_id or uuid.uuid4().hex,
            site=site,
            labels=labels,
            path=path,
            page_type=page_type,
            parent_id=parent_id,
            depth=depth,
            order=order,
            description=description,
        )
        if enabled is not None:
            values["enabled"] = enabled
        try:
            menu = MenuRecord(**values)
        except PydanticValidationError as e:
            raise Err.from_pydantic(e, "菜单数据不合法") from e

        batch = BatchCommitCoordinator(self.store)
        batch.set(self.collection, menu.id, menu.to_document())
        batch.apply_order_updates(self.collection, shifts)
        batch.commit()

        logger.info(f"创建菜单: {menu.id} site={site} parent={parent_id} order={order}")
        return menu

    # ==================== 更新 ====================

    def update_menu(self, menu_id: str, **fields: Any) -> MenuRecord:
        """更新菜单内容字段

        path 变更时在同一批次中联动页面 slug（外部链接除外）；
        某语言停用时联动停用全部子孙菜单。

        Raises:
            ValidationException: 试图修改结构字段，或在上级停用时启用
        """
        structural = STRUCTURAL_FIELDS.intersection(fields)
        if structural:
            raise Err.invalid(
                f"结构字段不能直接修改，请使用移动接口: {', '.join(sorted(structural))}",
                code=ErrorCode.INVALID_PARAMETER,
                fields=sorted(structural),
            )

        menu = self.get_menu(menu_id)
        try:
            updated = MenuRecord.model_validate({**menu.model_dump(), **fields})
        except PydanticValidationError as e:
            raise Err.from_pydantic(e, "菜单数据不合法", menu_id=menu_id) from e
        self._validate_payload(updated.site, updated.labels, updated.path)

        snapshot = self.snapshot(menu.site)
        batch = BatchCommitCoordinator(self.store)

        old_doc = menu.to_document()
        new_doc = updated.to_document()
        changes = {k: v for k, v in new_doc.items() if old_doc.get(k) != v}
        cleared = [k for k in old_doc if k not in new_doc]
        if not changes and not cleared:
            return menu
        batch.patch(self.collection, menu_id, changes, cleared)

        new_path_owner = menu.model_copy(update={"page_type": updated.page_type})
        if self.resolver.requires_path_cascade(new_path_owner, updated.path):
            batch.extend(self.resolver.on_path_changed(menu_id, menu.path, updated.path))

        disabled = [loc for loc, on in menu.enabled.items() if on and not updated.enabled.get(loc, False)]
        enabled = [loc for loc, on in updated.enabled.items() if on and not menu.enabled.get(loc, False)]
        if enabled and not snapshot.is_root(menu.parent_id):
            parent = snapshot.get(menu.parent_id)
            if parent is not None:
                blocked = [loc for loc in enabled if not parent.enabled.get(loc, False)]
                if blocked:
                    raise Err.invalid(
                        f"上级菜单未启用，不能启用: {', '.join(blocked)}",
                        code=ErrorCode.INVALID_PARAMETER,
                        menu_id=menu_id,
                        locales=blocked,
                    )
        if disabled:
            batch.extend(self.resolver.on_menu_disabled(snapshot, menu_id, disabled))

        count = len(batch)
        batch.commit()
        logger.info(f"更新菜单: {menu_id} 字段={sorted([*changes, *cleared])} 写入 {count} 条")
        return updated

    # ==================== 移动 ====================

    def move_menu(
        self,
        menu_id: str,
        new_parent_id: Optional[str],
        target_index: int,
    ) -> List[Union[OrderUpdate, NodeUpdate]]:
        """拖拽移动菜单

        Returns:
            已提交的更新列表，移动到原位置时为空
        """
        menu = self.get_menu(menu_id)
        snapshot = self.snapshot(menu.site)
        updates = plan_move(
            snapshot,
            menu_id,
            new_parent_id,
            target_index,
            allow_reparent_with_children=self.settings.allow_reparent_with_children,
        )
        if not updates:
            return []

        BatchCommitCoordinator(self.store).apply_node_updates(self.collection, updates).commit()
        logger.info(f"移动菜单: {menu_id} -> parent={new_parent_id or self.settings.root_parent_id} index={target_index}")
        return updates

    # ==================== 删除 ====================

    def delete_menu(self, menu_id: str, delete_pages: bool = False) -> Dict[str, Any]:
        """删除菜单

        Args:
            menu_id: 菜单ID
            delete_pages: 是否同时删除绑定的页面

        Returns:
            {"deleted_pages": [...]}

        Raises:
            ResourceConflictException: 有子菜单，或有绑定页面且 delete_pages 为 False
        """
        menu = self.get_menu(menu_id)
        snapshot = self.snapshot(menu.site)

        children = snapshot.children(menu_id)
        if children:
            raise Err.conflict(
                "请先删除子菜单",
                code=ErrorCode.HAS_CHILDREN,
                menu_id=menu_id,
                children=[c.id for c in children],
            )

        page_deletes = self.resolver.on_menu_deleted(menu_id)
        if page_deletes and not delete_pages:
            raise Err.conflict(
                "菜单仍绑定页面，请先删除页面",
                code=ErrorCode.HAS_BOUND_PAGES,
                menu_id=menu_id,
                pages=[m.doc_id for m in page_deletes],
            )

        batch = BatchCommitCoordinator(self.store)
        batch.delete(self.collection, menu_id)
        batch.extend(page_deletes)
        batch.apply_order_updates(self.collection, plan_removal(snapshot, menu_id))
        batch.commit()

        logger.info(f"删除菜单: {menu_id} 页面 {len(page_deletes)} 个")
        return {"deleted_pages": [m.doc_id for m in page_deletes]}

    # ==================== 内部方法 ====================

    @staticmethod
    def _validate_payload(site: str, labels: Dict[str, str], path: str) -> None:
        details = []
        if site not in SITES:
            details.append(f"site 必须是 {' / '.join(SITES)}")
        if not (labels or {}).get("ko"):
            details.append("labels.ko 不能为空")
        if not path:
            details.append("path 不能为空")
        if details:
            raise Err.invalid("菜单数据不合法", details=details)


__all__ = ["MenuService", "SITES"]
