"""HTTP 接口模块

使用示例:
    from fastapi import FastAPI
    from ycms import register_exception_handlers
    from ycms.api import create_menu_router, create_category_router

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_menu_router(menu_service), prefix="/api/v1/menus", tags=["菜单"])
    app.include_router(create_category_router(category_service), prefix="/api/v1/faq-categories", tags=["FAQ分类"])
"""

from .menu_api import create_menu_router, serialize_updates
from .category_api import create_category_router
from .schemas import (
    MenuCreate,
    MenuUpdate,
    MenuMove,
    CategoryCreate,
    CategoryUpdate,
    CategoryReorder,
)

__all__ = [
    "create_menu_router",
    "create_category_router",
    "serialize_updates",
    "MenuCreate",
    "MenuUpdate",
    "MenuMove",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryReorder",
]
