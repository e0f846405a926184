"""导航菜单 API

使用动词风格路由，只使用 GET 和 POST 请求。
业务异常由全局异常处理器转换为统一响应，这里不捕获。
"""

from typing import Any, Dict, Iterable, List

from fastapi import APIRouter, Query

from ycms.response import ItemResponse, OkResponse, Resp
from ycms.services import MenuService
from ycms.tree import MenuRecord

from .schemas import MenuCreate, MenuMove, MenuUpdate


def serialize_updates(updates: Iterable) -> List[Dict[str, Any]]:
    """规划结果转换为 [{"id": ..., "order": ...}, ...]"""
    return [{"id": u.id, **u.to_fields()} for u in updates]


def create_menu_router(service: MenuService) -> APIRouter:
    """创建菜单路由

    Args:
        service: 菜单服务实例

    Returns:
        APIRouter

    生成的路由:
        GET  /list    - 菜单列表（先序平铺）
        GET  /tree    - 菜单树
        GET  /get     - 菜单详情
        POST /create  - 创建菜单
        POST /update  - 更新菜单（path 联动页面 slug）
        POST /move    - 拖拽移动
        POST /delete  - 删除菜单
    """
    router = APIRouter()

    # ==================== 查询接口 ====================

    @router.get("/list", response_model=OkResponse, summary="获取菜单列表")
    async def list_menus(site: str = Query("web", description="站点")):
        return Resp.OK(data=service.list_menus(site))

    @router.get("/tree", response_model=OkResponse, summary="获取菜单树")
    async def get_menu_tree(site: str = Query("web", description="站点")):
        return Resp.OK(data=[node.to_dict() for node in service.get_menu_tree(site)])

    @router.get("/get", response_model=ItemResponse[MenuRecord], summary="获取菜单详情")
    async def get_menu(menu_id: str = Query(..., description="菜单ID")):
        return Resp.OK(data=service.get_menu(menu_id))

    # ==================== 写入接口 ====================

    @router.post("/create", response_model=ItemResponse[MenuRecord], summary="创建菜单")
    async def create_menu(data: MenuCreate):
        menu = service.create_menu(
            site=data.site,
            labels=data.labels,
            path=data.path,
            parent_id=data.parent_id,
            order=data.order,
            page_type=data.page_type,
            enabled=data.enabled,
            description=data.description,
        )
        return Resp.OK(data=menu, message="创建成功")

    @router.post("/update", response_model=ItemResponse[MenuRecord], summary="更新菜单")
    async def update_menu(
        data: MenuUpdate,
        menu_id: str = Query(..., description="菜单ID"),
    ):
        menu = service.update_menu(menu_id, **data.model_dump(exclude_unset=True))
        return Resp.OK(data=menu, message="更新成功")

    @router.post("/move", response_model=OkResponse, summary="移动菜单")
    async def move_menu(data: MenuMove):
        updates = service.move_menu(data.menu_id, data.new_parent_id, data.target_index)
        return Resp.OK(data=serialize_updates(updates), message="移动成功")

    @router.post("/delete", response_model=OkResponse, summary="删除菜单")
    async def delete_menu(
        menu_id: str = Query(..., description="菜单ID"),
        delete_pages: bool = Query(False, description="是否同时删除绑定页面"),
    ):
        result = service.delete_menu(menu_id, delete_pages=delete_pages)
        return Resp.OK(data={"id": menu_id, **result}, message="删除成功")

    return router


__all__ = ["create_menu_router", "serialize_updates"]
