"""导航树模块

提供菜单树的记录模型、森林构建/展平、快照以及结构变更规划。

使用示例:
    from ycms.tree import MenuRecord, TreeSnapshot, build_forest, plan_move

    snapshot = TreeSnapshot(menus)
    forest = build_forest(snapshot.nodes)
    updates = plan_move(snapshot, "B", "A", 0)
"""

from .models import (
    ROOT_PARENT_ID,
    Site,
    PageType,
    Record,
    TreeNode,
    MenuRecord,
    PageRecord,
    SequentialItem,
    CategoryRecord,
    FaqRecord,
    OrderUpdate,
    NodeUpdate,
    ForestNode,
)

from .tree_utils import (
    build_forest,
    flatten_forest,
    find_node_in_forest,
    get_node_path,
    calculate_forest_depth,
)

from .snapshot import TreeSnapshot

from .planner import (
    reorder_within_parent,
    reparent,
    plan_move,
    plan_removal,
    can_drop,
)

__all__ = [
    # 模型
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
    # 森林工具
    "build_forest",
    "flatten_forest",
    "find_node_in_forest",
    "get_node_path",
    "calculate_forest_depth",
    # 快照与规划
    "TreeSnapshot",
    "reorder_within_parent",
    "reparent",
    "plan_move",
    "plan_removal",
    "can_drop",
]
