"""树形结构工具函数

提供扁平节点列表与嵌套森林之间的转换及查询工具。

使用示例:
    from ycms.tree import build_forest, flatten_forest

    nodes = [
        TreeNode(id="a", parent_id="0", depth=1, order=2),
        TreeNode(id="b", parent_id="0", depth=1, order=1),
        TreeNode(id="c", parent_id="a", depth=2, order=1),
    ]
    forest = build_forest(nodes)
    # [b, a[c]]

    flat = flatten_forest(forest)
    # [b, a, c]
"""

from typing import Dict, List, Optional, Sequence

from .models import ROOT_PARENT_ID, ForestNode, TreeNode


def build_forest(
    nodes: Sequence[TreeNode],
    root_parent_id: str = ROOT_PARENT_ID,
) -> List[ForestNode]:
    """将扁平节点列表构建为森林

    输入顺序任意。parent_id 为根哨兵、为空或指向不存在节点的节点都作为根，
    不会被丢弃。每一层按 order 升序排序，order 相同时保持输入顺序（稳定排序）。

    Args:
        nodes: 扁平节点列表
        root_parent_id: 根哨兵值

    Returns:
        根节点列表，子节点已递归排序

    使用示例:
        forest = build_forest(menus)
        for root in forest:
            print(root.id, [c.id for c in root.children])
    """
    if not nodes:
        return []

    forest_map: Dict[str, ForestNode] = {}
    for node in nodes:
        forest_map[node.id] = ForestNode(node=node)

    roots: List[ForestNode] = []

    for forest_node in forest_map.values():
        parent_id = forest_node.node.parent_id

        if (
            not parent_id
            or parent_id == root_parent_id
            or parent_id == forest_node.id
            or parent_id not in forest_map
        ):
            roots.append(forest_node)
        else:
            forest_map[parent_id].children.append(forest_node)

    _sort_forest_recursive(roots)

    # 环上的节点不会从根可达，逐个提升为根避免静默丢失
    reachable = {n.id for n in flatten_forest(roots)}
    orphans = [fn for fn in forest_map.values() if fn.id not in reachable]
    while orphans:
        orphan = orphans[0]
        parent = forest_map.get(orphan.node.parent_id)
        if parent is not None and orphan in parent.children:
            parent.children.remove(orphan)
        roots.append(orphan)
        _sort_forest_recursive(roots)
        reachable = {n.id for n in flatten_forest(roots)}
        orphans = [fn for fn in forest_map.values() if fn.id not in reachable]

    return roots


def _sort_forest_recursive(nodes: List[ForestNode]):
    """递归排序森林节点"""
    nodes.sort(key=lambda fn: fn.node.order)
    for forest_node in nodes:
        if forest_node.children:
            _sort_forest_recursive(forest_node.children)


def flatten_forest(forest: Sequence[ForestNode]) -> List[TreeNode]:
    """将森林展平为节点列表

    先序遍历：父节点在子节点之前，子节点按已排序顺序。
    结果可以再次传给 build_forest，得到结构相同的森林。

    Args:
        forest: 根节点列表

    Returns:
        扁平节点列表
    """
    result: List[TreeNode] = []

    for forest_node in forest:
        result.append(forest_node.node)
        if forest_node.children:
            result.extend(flatten_forest(forest_node.children))

    return result


def find_node_in_forest(
    forest: Sequence[ForestNode],
    target_id: str,
) -> Optional[ForestNode]:
    """在森林中查找指定 ID 的节点

    Returns:
        找到的节点，未找到返回 None
    """
    for forest_node in forest:
        if forest_node.id == target_id:
            return forest_node

        if forest_node.children:
            found = find_node_in_forest(forest_node.children, target_id)
            if found:
                return found

    return None


def get_node_path(
    forest: Sequence[ForestNode],
    target_id: str,
) -> List[ForestNode]:
    """获取从根到目标节点的路径

    Returns:
        从根到目标节点的路径列表，未找到返回空列表
    """
    for forest_node in forest:
        if forest_node.id == target_id:
            return [forest_node]

        if forest_node.children:
            path = get_node_path(forest_node.children, target_id)
            if path:
                return [forest_node] + path

    return []


def calculate_forest_depth(
    forest: Sequence[ForestNode],
    _current_depth: int = 1,
) -> int:
    """计算森林的最大深度

    Returns:
        最大深度，空森林返回 0
    """
    if not forest:
        return _current_depth - 1

    max_depth = _current_depth

    for forest_node in forest:
        if forest_node.children:
            child_depth = calculate_forest_depth(
                forest_node.children,
                _current_depth=_current_depth + 1,
            )
            max_depth = max(max_depth, child_depth)

    return max_depth


__all__ = [
    "build_forest",
    "flatten_forest",
    "find_node_in_forest",
    "get_node_path",
    "calculate_forest_depth",
]
