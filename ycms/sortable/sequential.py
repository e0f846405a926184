"""顺序集合排序

用于非树形的有序集合（如 FAQ 分类），集合内 order 在静止状态下为 1..N 连续唯一。
所有函数只读取传入的快照，返回 OrderUpdate 列表，由调用方一次性提交。

使用示例:
    from ycms.sortable import set_order

    # 分类 a=1, b=2, c=3, 把 c 移到第 1 位
    updates = set_order(categories, "c", 1)
    # [OrderUpdate("c", 1), OrderUpdate("a", 2), OrderUpdate("b", 3)]
"""

from typing import List, Optional, Sequence, Tuple

from ycms.exceptions import Err, ErrorCode
from ycms.log import get_logger
from ycms.tree.models import OrderUpdate, SequentialItem

logger = get_logger()


def _require(items: Sequence[SequentialItem], item_id: str) -> SequentialItem:
    for item in items:
        if item.id == item_id:
            return item
    raise Err.invalid(f"条目不在集合中: {item_id}", code=ErrorCode.INVALID_PARAMETER, item_id=item_id)


def set_order(
    items: Sequence[SequentialItem],
    item_id: str,
    new_order: int,
) -> List[OrderUpdate]:
    """修改条目的排序号，并移动中间区间的其他条目

    - new_order > old_order: old_order < order <= new_order 的条目减 1
    - new_order < old_order: new_order <= order < old_order 的条目加 1
    - 相等时返回空列表

    Args:
        items: 整个集合的快照
        item_id: 要修改的条目ID
        new_order: 新排序号（1..N）

    Returns:
        OrderUpdate 列表，第一个是目标条目本身

    Raises:
        ValidationException: 条目不存在或 new_order 不在 1..N 范围内
    """
    item = _require(items, item_id)
    if not 1 <= new_order <= len(items):
        raise Err.invalid(
            f"排序号必须在 1 到 {len(items)} 之间",
            code=ErrorCode.INVALID_PARAMETER,
            item_id=item_id,
            new_order=new_order,
        )

    old_order = item.order
    if new_order == old_order:
        return []

    updates = [OrderUpdate(id=item_id, order=new_order)]
    for other in items:
        if other.id == item_id:
            continue
        if new_order > old_order and old_order < other.order <= new_order:
            updates.append(OrderUpdate(id=other.id, order=other.order - 1))
        elif new_order < old_order and new_order <= other.order < old_order:
            updates.append(OrderUpdate(id=other.id, order=other.order + 1))

    logger.debug(f"顺序调整: {item_id} {old_order} -> {new_order}, 更新 {len(updates)} 条")
    return updates


def plan_removal(items: Sequence[SequentialItem], item_id: str) -> List[OrderUpdate]:
    """删除条目后关闭空位：排在它后面的条目 order 减 1"""
    removed = _require(items, item_id)
    return [
        OrderUpdate(id=other.id, order=other.order - 1)
        for other in items
        if other.id != item_id and other.order > removed.order
    ]


def plan_insert(
    items: Sequence[SequentialItem],
    order: Optional[int] = None,
) -> Tuple[int, List[OrderUpdate]]:
    """插入新条目

    Args:
        items: 集合快照
        order: 插入位置（1..N+1），默认追加到末尾

    Returns:
        (新条目的 order, 需要后移的条目更新列表)
    """
    last = len(items) + 1
    if order is None:
        return last, []
    if not 1 <= order <= last:
        raise Err.invalid(
            f"排序号必须在 1 到 {last} 之间",
            code=ErrorCode.INVALID_PARAMETER,
            new_order=order,
        )
    shifts = [
        OrderUpdate(id=other.id, order=other.order + 1)
        for other in items
        if other.order >= order
    ]
    return order, shifts


def normalize_orders(items: Sequence[SequentialItem]) -> List[OrderUpdate]:
    """消除排序号间隙和重复，从 1 开始连续编号

    使用示例:
        # 删除记录后排序号可能不连续: 1, 3, 7, 10
        updates = normalize_orders(items)
        # 规范化后变成: 1, 2, 3, 4
    """
    ordered = sorted(items, key=lambda i: i.order)
    return [
        OrderUpdate(id=item.id, order=position)
        for position, item in enumerate(ordered, 1)
        if item.order != position
    ]


def reorder_by_ids(items: Sequence[SequentialItem], ids: Sequence[str]) -> List[OrderUpdate]:
    """按给定 ID 顺序重新编号

    适用于前端拖拽排序后提交完整新顺序的场景。ids 必须恰好包含集合中的每个条目一次。
    """
    current = {item.id: item for item in items}
    if len(set(ids)) != len(ids) or set(ids) != set(current):
        raise Err.invalid(
            "ID 列表必须恰好包含集合中的全部条目",
            code=ErrorCode.INVALID_PARAMETER,
            ids=list(ids),
        )
    return [
        OrderUpdate(id=item_id, order=position)
        for position, item_id in enumerate(ids, 1)
        if current[item_id].order != position
    ]


__all__ = [
    "set_order",
    "plan_removal",
    "plan_insert",
    "normalize_orders",
    "reorder_by_ids",
]
