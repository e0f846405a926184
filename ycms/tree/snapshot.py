"""树快照

一次结构命令开始时读取的扁平节点集合的只读视图。
规划器只依赖快照，不读存储，因此可以脱离存储做单元测试。

使用示例:
    from ycms.tree import TreeSnapshot

    snapshot = TreeSnapshot(nodes, max_depth=3)
    snapshot.siblings("0")             # 顶层节点，按 order 排序
    snapshot.ancestor_ids("c")         # ["b", "a"]
    snapshot.validate()                # [] 表示四条不变量都成立
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ycms.exceptions import CycleException, Err, ErrorCode, ValidationException

from .models import ROOT_PARENT_ID, TreeNode


class TreeSnapshot:
    """树快照

    Args:
        nodes: 同一作用域（如某个站点的全部菜单）的扁平节点列表，顺序任意
        root_parent_id: 根哨兵值
        max_depth: 最大层级，用于限制祖先链遍历
    """

    def __init__(
        self,
        nodes: Iterable[TreeNode],
        root_parent_id: str = ROOT_PARENT_ID,
        max_depth: int = 3,
    ):
        self.root_parent_id = root_parent_id
        self.max_depth = max_depth
        self._nodes: List[TreeNode] = list(nodes)
        self._by_id: Dict[str, TreeNode] = {}
        self._children: Dict[str, List[TreeNode]] = defaultdict(list)

        for node in self._nodes:
            self._by_id[node.id] = node
        for node in self._nodes:
            self._children[node.parent_id].append(node)
        for children in self._children.values():
            # 稳定排序，order 相同时保持输入顺序
            children.sort(key=lambda n: n.order)

    # ==================== 查询 ====================

    @property
    def nodes(self) -> List[TreeNode]:
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._by_id

    def get(self, node_id: str) -> Optional[TreeNode]:
        return self._by_id.get(node_id)

    def require(self, node_id: str) -> TreeNode:
        """获取节点，不存在时抛出 ValidationException"""
        node = self._by_id.get(node_id)
        if node is None:
            raise Err.invalid(f"节点不在快照中: {node_id}", code=ErrorCode.INVALID_PARAMETER, node_id=node_id)
        return node

    def is_root(self, parent_id: Optional[str]) -> bool:
        return not parent_id or parent_id == self.root_parent_id

    def children(self, parent_id: str) -> List[TreeNode]:
        """直接子节点，按 order 排序"""
        return list(self._children.get(parent_id, []))

    def siblings(self, parent_id: str, exclude: Optional[str] = None) -> List[TreeNode]:
        """同一父节点下的节点，按 order 排序

        Args:
            parent_id: 父节点ID
            exclude: 要排除的节点ID
        """
        return [n for n in self._children.get(parent_id, []) if n.id != exclude]

    def index_of(self, node_id: str) -> int:
        """节点在同级中的当前位置（0-based）"""
        node = self.require(node_id)
        for index, sibling in enumerate(self._children[node.parent_id]):
            if sibling.id == node_id:
                return index
        raise Err.invalid(f"节点不在同级列表中: {node_id}")

    def next_order(self, parent_id: str) -> int:
        """追加到末尾时使用的 order（最大同级 order + 1）"""
        children = self._children.get(parent_id, [])
        if not children:
            return 1
        return max(n.order for n in children) + 1

    def depth_for_parent(self, parent_id: str) -> int:
        """新父节点下子节点应有的 depth"""
        if self.is_root(parent_id):
            return 1
        return self.require(parent_id).depth + 1

    def ancestor_ids(self, node_id: str) -> List[str]:
        """祖先ID列表，从父节点到顶层节点

        沿 parent_id 遍历直到根哨兵，到达根哨兵最多 max_depth 跳。

        Raises:
            CycleException: 祖先链中出现重复节点
            ValidationException: 链长超过 max_depth（code=MAX_DEPTH_EXCEEDED）
        """
        ancestors: List[str] = []
        seen = {node_id}
        current = self.require(node_id)

        while not self.is_root(current.parent_id):
            parent = self._by_id.get(current.parent_id)
            if parent is None:
                # 悬空引用在读取时视作根
                break
            if parent.id in seen:
                raise Err.cycle(f"节点祖先链存在环: {node_id}", node_id=node_id, repeated_id=parent.id)
            ancestors.append(parent.id)
            seen.add(parent.id)
            current = parent

        if len(ancestors) + 1 > self.max_depth:
            raise Err.invalid(
                f"节点层级 {len(ancestors) + 1} 超过最大层级 {self.max_depth}: {node_id}",
                code=ErrorCode.MAX_DEPTH_EXCEEDED,
                node_id=node_id,
                max_depth=self.max_depth,
            )
        return ancestors

    def descendants(self, node_id: str) -> List[TreeNode]:
        """所有子孙节点（先序，按 order）"""
        result: List[TreeNode] = []
        stack = list(reversed(self._children.get(node_id, [])))
        visited = {node_id}
        while stack:
            node = stack.pop()
            if node.id in visited:
                continue
            visited.add(node.id)
            result.append(node)
            stack.extend(reversed(self._children.get(node.id, [])))
        return result

    def is_ancestor_of(self, ancestor_id: str, node_id: str) -> bool:
        return any(n.id == node_id for n in self.descendants(ancestor_id))

    def subtree_height(self, node_id: str) -> int:
        """以节点为根的子树高度（叶子为 1）"""
        node = self.require(node_id)
        descendants = self.descendants(node_id)
        if not descendants:
            return 1
        return max(d.depth for d in descendants) - node.depth + 1

    # ==================== 不变量检查 ====================

    def validate(self) -> List[str]:
        """检查四条不变量，返回全部违例描述

        Returns:
            违例描述列表，空列表表示快照一致
        """
        problems: List[str] = []

        for node in self._nodes:
            if not self.is_root(node.parent_id) and node.parent_id not in self._by_id:
                problems.append(f"悬空父节点: {node.id} -> {node.parent_id}")
                continue

            try:
                self.ancestor_ids(node.id)
            except CycleException:
                problems.append(f"环: {node.id}")
                continue
            except ValidationException:
                problems.append(f"层级过深: {node.id}")
                continue

            expected = self.depth_for_parent(node.parent_id)
            if node.depth != expected:
                problems.append(f"层级不一致: {node.id} depth={node.depth}, 期望 {expected}")

        for parent_id, children in self._children.items():
            seen_orders: Dict[int, str] = {}
            for child in children:
                if child.order in seen_orders:
                    problems.append(
                        f"同级排序重复: parent={parent_id} order={child.order} "
                        f"({seen_orders[child.order]}, {child.id})"
                    )
                else:
                    seen_orders[child.order] = child.id

        return problems


__all__ = ["TreeSnapshot"]
