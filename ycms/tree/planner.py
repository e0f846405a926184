"""树结构变更规划器

规划器是纯函数：输入快照和命令，输出需要写入的最小更新集合，
不读写存储。调用方负责把结果交给 BatchCommitCoordinator 一次性提交。

使用示例:
    from ycms.tree import TreeSnapshot, plan_move

    snapshot = TreeSnapshot(menus, max_depth=3)
    updates = plan_move(snapshot, "B", new_parent_id="A", target_index=0)
    # [NodeUpdate(id="B", parent_id="A", depth=2, order=1), NodeUpdate(id="C", order=2)]
"""

from typing import List, Optional, Sequence, Union

from ycms.exceptions import Err, ErrorCode
from ycms.log import get_logger

from .models import NodeUpdate, OrderUpdate, TreeNode
from .snapshot import TreeSnapshot

logger = get_logger()

NodesLike = Union[TreeSnapshot, Sequence[TreeNode]]


def _as_snapshot(nodes: NodesLike) -> TreeSnapshot:
    if isinstance(nodes, TreeSnapshot):
        return nodes
    return TreeSnapshot(nodes)


def _check_index(target_index: int) -> None:
    if target_index < 0:
        raise Err.invalid(
            "targetIndex 不能为负数",
            code=ErrorCode.INVALID_PARAMETER,
            target_index=target_index,
        )


def _renumber_with_slot(siblings: List[TreeNode], slot_index: int) -> List[OrderUpdate]:
    """为同级节点重新编号，跳过 slot_index + 1 留给被移动节点"""
    updates: List[OrderUpdate] = []
    order = 1
    for sibling in siblings:
        if order == slot_index + 1:
            order += 1
        if sibling.order != order:
            updates.append(OrderUpdate(id=sibling.id, order=order))
        order += 1
    return updates


def _renumber_dense(siblings: List[TreeNode]) -> List[OrderUpdate]:
    """从 1 开始连续编号"""
    return [
        OrderUpdate(id=sibling.id, order=order)
        for order, sibling in enumerate(siblings, 1)
        if sibling.order != order
    ]


# ==================== 同级排序 ====================

def reorder_within_parent(
    nodes: NodesLike,
    moved_id: str,
    target_index: int,
) -> List[OrderUpdate]:
    """同级内移动节点

    被移动节点的 order 设为 target_index + 1，其余同级节点按原顺序
    从 1 连续编号并跳过该位置。只返回 order 发生变化的节点。

    Args:
        nodes: 快照或扁平节点列表
        moved_id: 被移动节点ID
        target_index: 目标位置（0-based），超过同级数量时追加到末尾

    Returns:
        OrderUpdate 列表，移动到当前位置时为空

    Raises:
        ValidationException: target_index 为负数或节点不存在

    使用示例:
        updates = reorder_within_parent(snapshot, "c", 0)
        # c 移到第一位，原来排在前面的节点依次后移
    """
    snapshot = _as_snapshot(nodes)
    _check_index(target_index)
    moved = snapshot.require(moved_id)

    siblings = snapshot.siblings(moved.parent_id, exclude=moved_id)
    target_index = min(target_index, len(siblings))

    if target_index == snapshot.index_of(moved_id):
        return []

    updates = _renumber_with_slot(siblings, target_index)
    if moved.order != target_index + 1:
        updates.insert(0, OrderUpdate(id=moved_id, order=target_index + 1))

    logger.debug(f"同级排序: {moved_id} -> index {target_index}, 更新 {len(updates)} 个节点")
    return updates


# ==================== 跨父节点移动 ====================

def reparent(
    nodes: NodesLike,
    moved_id: str,
    new_parent_id: Optional[str],
    target_index: int,
    allow_reparent_with_children: bool = True,
) -> List[NodeUpdate]:
    """把节点移动到新的父节点下

    依次生成：
        1. 被移动节点的 parent_id / depth / order
        2. 新父节点下原有子节点的重新编号（在 target_index 处让出位置）
        3. 原父节点下剩余子节点的连续重新编号（关闭空位）
        4. 子孙节点的 depth 修正（depth 差值不为 0 时）

    Args:
        nodes: 快照或扁平节点列表
        moved_id: 被移动节点ID
        new_parent_id: 新父节点ID，None 或根哨兵表示移动到顶层
        target_index: 在新父节点下的目标位置（0-based）
        allow_reparent_with_children: 是否允许移动有子节点的节点

    Returns:
        NodeUpdate 列表

    Raises:
        CycleException: 新父节点是自身或子孙节点
        ReferentialIntegrityException: 新父节点不存在
        ValidationException: target_index 为负数、超过最大层级、或不允许移动非叶子节点

    使用示例:
        # A, B, C 都在顶层，order 分别为 1, 2, 3
        reparent(nodes, "B", "A", 0)
        # [NodeUpdate("B", parent_id="A", depth=2, order=1), NodeUpdate("C", order=2)]
    """
    snapshot = _as_snapshot(nodes)
    _check_index(target_index)
    moved = snapshot.require(moved_id)

    if snapshot.is_root(new_parent_id):
        new_parent_id = snapshot.root_parent_id
        new_depth = 1
    else:
        if new_parent_id == moved_id:
            raise Err.cycle("不能将节点移动到其自身下", moved_id=moved_id, new_parent_id=new_parent_id)
        if new_parent_id not in snapshot:
            raise Err.integrity(f"父节点不存在: {new_parent_id}", parent_id=new_parent_id)
        if snapshot.is_ancestor_of(moved_id, new_parent_id):
            raise Err.cycle(
                "不能将节点移动到其子孙节点下",
                moved_id=moved_id,
                new_parent_id=new_parent_id,
            )
        if new_parent_id != moved.parent_id:
            # 新父节点的祖先链必须完整，环或过深的历史数据在此拒绝
            snapshot.ancestor_ids(new_parent_id)
        new_depth = snapshot.require(new_parent_id).depth + 1

    if new_parent_id == moved.parent_id:
        return [
            NodeUpdate(id=u.id, order=u.order)
            for u in reorder_within_parent(snapshot, moved_id, target_index)
        ]

    descendants = snapshot.descendants(moved_id)
    if descendants and not allow_reparent_with_children:
        raise Err.invalid("不允许移动含有子节点的节点", code=ErrorCode.HAS_CHILDREN, node_id=moved_id)

    depth_delta = new_depth - moved.depth
    deepest = new_depth + snapshot.subtree_height(moved_id) - 1
    if deepest > snapshot.max_depth:
        raise Err.invalid(
            f"移动后层级 {deepest} 超过最大层级 {snapshot.max_depth}",
            code=ErrorCode.MAX_DEPTH_EXCEEDED,
            node_id=moved_id,
            max_depth=snapshot.max_depth,
        )

    new_siblings = snapshot.siblings(new_parent_id)
    target_index = min(target_index, len(new_siblings))

    updates: List[NodeUpdate] = [
        NodeUpdate(id=moved_id, parent_id=new_parent_id, depth=new_depth, order=target_index + 1)
    ]
    updates.extend(
        NodeUpdate(id=u.id, order=u.order)
        for u in _renumber_with_slot(new_siblings, target_index)
    )
    updates.extend(
        NodeUpdate(id=u.id, order=u.order)
        for u in _renumber_dense(snapshot.siblings(moved.parent_id, exclude=moved_id))
    )
    if depth_delta:
        updates.extend(
            NodeUpdate(id=d.id, depth=d.depth + depth_delta) for d in descendants
        )

    logger.debug(
        f"跨父移动: {moved_id} {moved.parent_id} -> {new_parent_id} "
        f"(depth {moved.depth} -> {new_depth}), 更新 {len(updates)} 个节点"
    )
    return updates


def plan_move(
    snapshot: NodesLike,
    moved_id: str,
    new_parent_id: Optional[str],
    target_index: int,
    allow_reparent_with_children: bool = True,
) -> List[Union[OrderUpdate, NodeUpdate]]:
    """拖拽移动入口

    父节点不变时走同级排序，否则走跨父移动。
    """
    snapshot = _as_snapshot(snapshot)
    moved = snapshot.require(moved_id)
    target_parent = snapshot.root_parent_id if snapshot.is_root(new_parent_id) else new_parent_id

    if target_parent == moved.parent_id:
        return list(reorder_within_parent(snapshot, moved_id, target_index))
    return list(reparent(
        snapshot,
        moved_id,
        target_parent,
        target_index,
        allow_reparent_with_children=allow_reparent_with_children,
    ))


def plan_removal(nodes: NodesLike, node_id: str) -> List[OrderUpdate]:
    """删除节点后关闭同级空位"""
    snapshot = _as_snapshot(nodes)
    node = snapshot.require(node_id)
    return _renumber_dense(snapshot.siblings(node.parent_id, exclude=node_id))


def can_drop(nodes: NodesLike, dragged_id: str, target_parent_id: Optional[str]) -> bool:
    """判断拖拽目标是否合法

    放到顶层或自身始终允许，放到自己的子孙节点下不允许。
    """
    snapshot = _as_snapshot(nodes)
    if snapshot.is_root(target_parent_id) or target_parent_id == dragged_id:
        return True
    return not snapshot.is_ancestor_of(dragged_id, target_parent_id)


__all__ = [
    "reorder_within_parent",
    "reparent",
    "plan_move",
    "plan_removal",
    "can_drop",
]
