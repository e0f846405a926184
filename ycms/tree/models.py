"""导航树记录模型

记录按种类建模（MenuRecord / PageRecord / CategoryRecord / FaqRecord），
每种记录声明自己的字段结构和所属集合（__collection__），不使用开放字典。

文档存储中的字段沿用驼峰命名（parentId、pageType、menuId），
模型同时接受驼峰别名和下划线字段名。

使用示例:
    from ycms.tree.models import MenuRecord

    menu = MenuRecord.from_document("m1", {"parentId": "0", "depth": 1, "order": 1, "path": "/about"})
    menu.parent_id           # "0"
    menu.to_document()       # {"parentId": "0", "depth": 1, "order": 1, ...}
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# 根节点哨兵：顶层菜单的 parentId（根本身深度为 0，不存储）
ROOT_PARENT_ID = "0"

Site = Literal["web", "docs"]
PageType = Literal["dynamic", "static", "notice", "links"]


class Record(BaseModel):
    """文档记录基类"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    __collection__: ClassVar[str] = ""

    id: str = Field(description="文档ID，创建后不可变")

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]):
        """从存储文档构建记录"""
        payload = dict(data)
        payload["id"] = doc_id
        return cls.model_validate(payload)

    def to_document(self) -> Dict[str, Any]:
        """转换为存储文档（不含 id）"""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)


# ==================== 树节点 ====================

class TreeNode(Record):
    """树节点

    不变量（每次提交后成立）:
        1. 无环：沿 parent_id 最多 max_depth 跳到达根哨兵
        2. 同级唯一：同一 parent_id 下 order 不重复
        3. 层级一致：depth == parent.depth + 1，顶层为 1
        4. 引用完整：非根 parent_id 必须指向存在的节点
    """

    parent_id: str = Field(default=ROOT_PARENT_ID, alias="parentId", description="父节点ID，顶层为 '0'")
    depth: int = Field(default=1, ge=0, description="层级，顶层为 1")
    order: int = Field(default=0, ge=0, description="同级排序号")


class MenuRecord(TreeNode):
    """菜单记录"""

    __collection__: ClassVar[str] = "menus"

    site: Site = "web"
    labels: Dict[str, str] = Field(default_factory=lambda: {"ko": ""})
    path: str = ""
    page_type: PageType = Field(default="dynamic", alias="pageType")
    enabled: Dict[str, bool] = Field(default_factory=lambda: {"ko": True, "en": False})
    description: Optional[Dict[str, str]] = None

    def is_external_link(self, external_type: str = "links") -> bool:
        return self.page_type == external_type


class PageRecord(Record):
    """页面记录（只关心与菜单的绑定关系）"""

    __collection__: ClassVar[str] = "pages"

    menu_id: str = Field(alias="menuId")
    slug: str = ""
    site: Site = "web"


# ==================== 顺序集合 ====================

class SequentialItem(Record):
    """顺序集合成员，静止状态下 order 在集合内为 1..N 连续且唯一"""

    order: int = Field(default=0, ge=0)


class CategoryRecord(SequentialItem):
    """FAQ 分类记录"""

    __collection__: ClassVar[str] = "faqCategories"

    name: Dict[str, str] = Field(default_factory=lambda: {"ko": ""})
    description: Optional[Dict[str, str]] = None
    enabled: Dict[str, bool] = Field(default_factory=lambda: {"ko": True, "en": True})


class FaqRecord(Record):
    """FAQ 记录（只用于判断分类是否被使用）"""

    __collection__: ClassVar[str] = "faqs"

    category_id: str = Field(alias="categoryId")


# ==================== 更新值对象 ====================

@dataclass(frozen=True)
class OrderUpdate:
    """排序号变更"""

    id: str
    order: int

    def to_fields(self) -> Dict[str, Any]:
        return {"order": self.order}


@dataclass(frozen=True)
class NodeUpdate:
    """节点结构变更，只写入非 None 字段"""

    id: str
    order: Optional[int] = None
    parent_id: Optional[str] = None
    depth: Optional[int] = None

    def to_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if self.parent_id is not None:
            fields["parentId"] = self.parent_id
        if self.depth is not None:
            fields["depth"] = self.depth
        if self.order is not None:
            fields["order"] = self.order
        return fields


# ==================== 森林 ====================

@dataclass(eq=False)
class ForestNode:
    """森林中的节点：原始记录 + 已排序的子节点"""

    node: TreeNode
    children: List["ForestNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.node.id

    def to_dict(self) -> Dict[str, Any]:
        data = self.node.model_dump(by_alias=True)
        data["children"] = [child.to_dict() for child in self.children]
        return data


__all__ = [
    "ROOT_PARENT_ID",
    "Site",
    "PageType",
    "Record",
    "TreeNode",
    "MenuRecord",
    "PageRecord",
    "SequentialItem",
    "CategoryRecord",
    "FaqRecord",
    "OrderUpdate",
    "NodeUpdate",
    "ForestNode",
]
