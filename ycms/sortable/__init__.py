"""顺序集合模块

提供扁平有序集合（FAQ 分类等）的排序号计算。

使用示例:
    from ycms.sortable import set_order, plan_insert, reorder_by_ids

    updates = set_order(categories, "c", 1)
    order, shifts = plan_insert(categories)      # 追加到末尾
    updates = reorder_by_ids(categories, ["c", "a", "b"])
"""

from .sequential import (
    set_order,
    plan_removal,
    plan_insert,
    normalize_orders,
    reorder_by_ids,
)

__all__ = [
    "set_order",
    "plan_removal",
    "plan_insert",
    "normalize_orders",
    "reorder_by_ids",
]
