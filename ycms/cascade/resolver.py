"""级联解析

结构变更提交前，计算必须在同一批次中一起写入的依赖记录更新。
解析器只读取存储，不写入。

使用示例:
    from ycms.cascade import CascadeResolver

    resolver = CascadeResolver(store)
    if resolver.requires_path_cascade(menu, "/new"):
        batch.extend(resolver.on_path_changed(menu.id, menu.path, "/new"))
"""

from typing import List, Optional, Sequence, Union

from ycms.config import TreeSettings
from ycms.log import get_logger
from ycms.sortable import sequential
from ycms.store.base import DocumentStore, Mutation
from ycms.tree.models import MenuRecord, OrderUpdate, PageRecord, SequentialItem
from ycms.tree.snapshot import TreeSnapshot

logger = get_logger()


class CascadeResolver:
    """级联解析器

    Args:
        store: 文档存储（只用于依赖查找）
        settings: 导航树配置，决定集合名和外部链接类型
    """

    def __init__(self, store: DocumentStore, settings: Optional[TreeSettings] = None):
        self.store = store
        self.settings = settings or TreeSettings()

    def requires_path_cascade(self, menu: MenuRecord, new_path: Optional[str]) -> bool:
        """path 变化且不是外部链接时才需要联动页面"""
        if new_path is None or new_path == menu.path:
            return False
        return not menu.is_external_link(self.settings.external_link_page_type)

    def on_path_changed(self, menu_id: str, old_path: str, new_path: str) -> List[Mutation]:
        """菜单 path 变更：绑定到该菜单的每个页面 slug 改为新 path

        不向子菜单传播，子菜单 path 是独立字符串。
        """
        if old_path == new_path:
            return []

        collection = self.settings.pages_collection
        pages = self.store.find_by_foreign_key(collection, "menuId", menu_id)
        mutations = [Mutation.update(collection, page.id, {"slug": new_path}) for page in pages]

        logger.debug(f"path 级联: 菜单 {menu_id} {old_path} -> {new_path}, 影响 {len(mutations)} 个页面")
        return mutations

    def on_category_deleted(self, items: Sequence[SequentialItem], category_id: str) -> List[OrderUpdate]:
        """分类删除：排在其后的分类 order 依次减 1"""
        return sequential.plan_removal(items, category_id)

    def on_menu_deleted(self, menu_id: str) -> List[Mutation]:
        """菜单删除：删除绑定的页面"""
        collection = self.settings.pages_collection
        pages = self.store.list_records(PageRecord, {"menuId": menu_id}, collection=collection)
        return [Mutation.delete(collection, page.id) for page in pages]

    def on_menu_disabled(
        self,
        snapshot: TreeSnapshot,
        menu_id: str,
        locale: Union[str, Sequence[str]],
    ) -> List[Mutation]:
        """菜单在某语言下停用：所有仍启用的子孙菜单一并停用

        locale 可以是单个语言或语言列表，每个子孙菜单最多产生一条更新。
        """
        locales = [locale] if isinstance(locale, str) else list(locale)
        collection = self.settings.menus_collection
        mutations: List[Mutation] = []
        for node in snapshot.descendants(menu_id):
            enabled = dict(getattr(node, "enabled", None) or {})
            turned_off = [loc for loc in locales if enabled.get(loc)]
            if turned_off:
                enabled.update({loc: False for loc in turned_off})
                mutations.append(Mutation.update(collection, node.id, {"enabled": enabled}))
        return mutations


__all__ = ["CascadeResolver"]
