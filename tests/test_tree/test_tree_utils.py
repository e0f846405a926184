"""森林构建 / 展平测试

测试 build_forest、flatten_forest 及查询工具：
1. 任意输入顺序、按 order 排序、稳定排序
2. 悬空父节点和环不会丢节点
3. 展平后再构建得到相同结构
"""

from ycms.tree import (
    build_forest,
    calculate_forest_depth,
    find_node_in_forest,
    flatten_forest,
    get_node_path,
)

from tests.helpers import node


def shape(forest):
    """森林结构：[(id, order, [children...]), ...]"""
    return [(fn.id, fn.node.order, shape(fn.children)) for fn in forest]


class TestBuildForest:
    """build_forest 测试"""

    def test_empty_input(self):
        """测试空输入"""
        assert build_forest([]) == []

    def test_sorts_every_level_by_order(self):
        """测试每一层按 order 升序"""
        nodes = [
            node("c", parent="a", depth=2, order=2),
            node("a", order=2),
            node("d", parent="a", depth=2, order=1),
            node("b", order=1),
        ]
        forest = build_forest(nodes)

        assert [fn.id for fn in forest] == ["b", "a"]
        assert [fn.id for fn in forest[1].children] == ["d", "c"]

    def test_ties_keep_input_order(self):
        """测试 order 相同时保持输入顺序"""
        nodes = [node("x", order=1), node("y", order=1), node("z", order=1)]
        assert [fn.id for fn in build_forest(nodes)] == ["x", "y", "z"]

    def test_dangling_parent_becomes_root(self):
        """测试父节点不存在的节点作为根，不被丢弃"""
        nodes = [node("a", order=1), node("orphan", parent="missing", depth=2, order=2)]
        forest = build_forest(nodes)

        assert {fn.id for fn in forest} == {"a", "orphan"}

    def test_empty_parent_is_root(self):
        """测试 parent_id 为空的节点作为根"""
        forest = build_forest([node("a", parent="", order=1)])
        assert [fn.id for fn in forest] == ["a"]

    def test_cycle_does_not_lose_nodes(self):
        """测试环上的节点仍出现在结果中"""
        nodes = [
            node("root", order=1),
            node("x", parent="y", depth=2, order=1),
            node("y", parent="x", depth=2, order=2),
        ]
        forest = build_forest(nodes)

        ids = [n.id for n in flatten_forest(forest)]
        assert sorted(ids) == ["root", "x", "y"]
        assert len(ids) == 3

    def test_custom_root_sentinel(self):
        """测试自定义根哨兵"""
        nodes = [node("a", parent="ROOT", order=1), node("b", parent="a", depth=2, order=1)]
        forest = build_forest(nodes, root_parent_id="ROOT")

        assert [fn.id for fn in forest] == ["a"]
        assert [fn.id for fn in forest[0].children] == ["b"]


class TestFlattenForest:
    """flatten_forest 测试"""

    def test_pre_order(self, sample_menus):
        """测试先序遍历：父在前，子按顺序"""
        flat = flatten_forest(build_forest(sample_menus))
        assert [n.id for n in flat] == ["about", "team", "history", "news", "docs-link"]

    def test_round_trip(self, sample_menus):
        """测试展平后再构建结构不变"""
        forest = build_forest(list(reversed(sample_menus)))
        rebuilt = build_forest(flatten_forest(forest))

        assert shape(rebuilt) == shape(forest)

    def test_round_trip_deep(self, chain_nodes):
        """测试多层链的往返"""
        forest = build_forest(chain_nodes)
        assert shape(build_forest(flatten_forest(forest))) == shape(forest)


class TestForestQueries:
    """森林查询工具测试"""

    def test_find_node(self, sample_menus):
        forest = build_forest(sample_menus)
        found = find_node_in_forest(forest, "history")

        assert found is not None
        assert found.node.path == "/about/history"
        assert find_node_in_forest(forest, "nope") is None

    def test_get_node_path(self, sample_menus):
        forest = build_forest(sample_menus)

        assert [fn.id for fn in get_node_path(forest, "team")] == ["about", "team"]
        assert get_node_path(forest, "nope") == []

    def test_calculate_depth(self, sample_menus, chain_nodes):
        assert calculate_forest_depth(build_forest(sample_menus)) == 2
        assert calculate_forest_depth(build_forest(chain_nodes)) == 3
        assert calculate_forest_depth([]) == 0

    def test_to_dict_includes_children(self, sample_menus):
        """测试 to_dict 输出驼峰字段和 children"""
        data = build_forest(sample_menus)[0].to_dict()

        assert data["id"] == "about"
        assert data["parentId"] == "0"
        assert [c["id"] for c in data["children"]] == ["team", "history"]
