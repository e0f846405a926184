"""应用服务模块

使用示例:
    from ycms.services import MenuService, CategoryService

    menus = MenuService(store, settings.tree)
    categories = CategoryService(store, settings.tree)
"""

from .menu_service import MenuService, SITES
from .category_service import CategoryService

__all__ = [
    "MenuService",
    "CategoryService",
    "SITES",
]
