"""FAQ 分类 API"""

from fastapi import APIRouter, Query

from ycms.response import ItemResponse, OkResponse, Resp
from ycms.services import CategoryService
from ycms.tree import CategoryRecord

from .menu_api import serialize_updates
from .schemas import CategoryCreate, CategoryReorder, CategoryUpdate


def create_category_router(service: CategoryService) -> APIRouter:
    """创建 FAQ 分类路由

    生成的路由:
        GET  /list     - 分类列表（按 order）
        GET  /get      - 分类详情
        POST /create   - 创建分类
        POST /update   - 更新分类（order 变化时移动区间内其他分类）
        POST /delete   - 删除分类
        POST /reorder  - 按ID顺序整体重排
    """
    router = APIRouter()

    @router.get("/list", response_model=OkResponse, summary="获取分类列表")
    async def list_categories():
        return Resp.OK(data=service.list_categories())

    @router.get("/get", response_model=ItemResponse[CategoryRecord], summary="获取分类详情")
    async def get_category(category_id: str = Query(..., description="分类ID")):
        return Resp.OK(data=service.get_category(category_id))

    @router.post("/create", response_model=ItemResponse[CategoryRecord], summary="创建分类")
    async def create_category(data: CategoryCreate):
        category = service.create_category(
            name=data.name,
            order=data.order,
            description=data.description,
            enabled=data.enabled,
        )
        return Resp.OK(data=category, message="创建成功")

    @router.post("/update", response_model=ItemResponse[CategoryRecord], summary="更新分类")
    async def update_category(
        data: CategoryUpdate,
        category_id: str = Query(..., description="分类ID"),
    ):
        category = service.update_category(category_id, **data.model_dump(exclude_unset=True))
        return Resp.OK(data=category, message="更新成功")

    @router.post("/delete", response_model=OkResponse, summary="删除分类")
    async def delete_category(category_id: str = Query(..., description="分类ID")):
        shifts = service.delete_category(category_id)
        return Resp.OK(data={"id": category_id, "shifted": serialize_updates(shifts)}, message="删除成功")

    @router.post("/reorder", response_model=OkResponse, summary="整体重排")
    async def reorder_categories(data: CategoryReorder):
        updates = service.reorder(data.ids)
        return Resp.OK(data=serialize_updates(updates), message="排序成功")

    return router


__all__ = ["create_category_router"]
