"""菜单 / FAQ 分类接口的请求与响应 Schema"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ycms.tree.models import PageType, Site


# ==================== 菜单 ====================

class MenuCreate(BaseModel):
    """创建菜单请求"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "site": "web",
                "labels": {"ko": "회사 소개", "en": "About"},
                "path": "/about",
                "parentId": "0",
                "pageType": "static",
            }
        },
    )

    site: Site = Field(..., description="站点")
    labels: Dict[str, str] = Field(..., description="多语言名称，必须包含 ko")
    path: str = Field(..., min_length=1, description="路径")
    parent_id: Optional[str] = Field(None, alias="parentId", description="父菜单ID，为空表示顶层")
    order: Optional[int] = Field(None, ge=1, description="同级位置（1-based），为空追加到末尾")
    page_type: PageType = Field("dynamic", alias="pageType", description="页面类型")
    enabled: Optional[Dict[str, bool]] = Field(None, description="各语言启用状态")
    description: Optional[Dict[str, str]] = Field(None, description="多语言描述")


class MenuUpdate(BaseModel):
    """更新菜单请求（结构字段请使用 /move）"""
    model_config = ConfigDict(populate_by_name=True)

    labels: Optional[Dict[str, str]] = Field(None, description="多语言名称")
    path: Optional[str] = Field(None, min_length=1, description="路径")
    page_type: Optional[PageType] = Field(None, alias="pageType", description="页面类型")
    enabled: Optional[Dict[str, bool]] = Field(None, description="各语言启用状态")
    description: Optional[Dict[str, str]] = Field(None, description="多语言描述")


class MenuMove(BaseModel):
    """拖拽移动请求"""
    model_config = ConfigDict(populate_by_name=True)

    menu_id: str = Field(..., alias="menuId", description="被移动的菜单ID")
    new_parent_id: Optional[str] = Field(None, alias="newParentId", description="新父菜单ID，为空表示顶层")
    target_index: int = Field(..., alias="targetIndex", description="目标位置（0-based）")


# ==================== FAQ 分类 ====================

class CategoryCreate(BaseModel):
    """创建分类请求"""
    name: Dict[str, str] = Field(..., description="多语言名称，必须包含 ko")
    order: Optional[int] = Field(None, ge=1, description="位置（1-based），为空追加到末尾")
    description: Optional[Dict[str, str]] = Field(None, description="多语言描述")
    enabled: Optional[Dict[str, bool]] = Field(None, description="各语言启用状态")


class CategoryUpdate(BaseModel):
    """更新分类请求"""
    name: Optional[Dict[str, str]] = Field(None, description="多语言名称")
    order: Optional[int] = Field(None, ge=1, description="新位置（1-based）")
    description: Optional[Dict[str, str]] = Field(None, description="多语言描述")
    enabled: Optional[Dict[str, bool]] = Field(None, description="各语言启用状态")


class CategoryReorder(BaseModel):
    """整体重排请求"""
    ids: List[str] = Field(..., min_length=1, description="按新顺序排列的全部分类ID")
