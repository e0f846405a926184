"""菜单服务测试

通过内存存储验证每个命令提交后四条不变量仍成立，以及级联写入在同一批次完成。
"""

import pytest

from ycms.exceptions import (
    BatchCommitException,
    CycleException,
    ErrorCode,
    ReferentialIntegrityException,
    ResourceConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from ycms.services import MenuService


def assert_consistent(service, site="web"):
    assert service.snapshot(site).validate() == []


class TestMenuQueries:
    """查询测试"""

    def test_list_menus_pre_order(self, menu_service):
        assert [m.id for m in menu_service.list_menus("web")] == [
            "about", "team", "history", "news", "docs-link",
        ]

    def test_sites_are_separate_scopes(self, menu_service):
        assert menu_service.list_menus("docs") == []

    def test_get_menu_not_found(self, menu_service):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            menu_service.get_menu("ghost")
        assert exc_info.value.code == ErrorCode.MENU_NOT_FOUND


class TestCreateMenu:
    """创建测试"""

    def test_append_at_end(self, menu_service):
        created = menu_service.create_menu("web", {"ko": "채용"}, "/careers")

        assert created.order == 4
        assert created.depth == 1
        assert created.parent_id == "0"
        assert menu_service.get_menu(created.id).path == "/careers"
        assert_consistent(menu_service)

    def test_child_depth_from_parent(self, menu_service):
        created = menu_service.create_menu("web", {"ko": "연혁"}, "/about/awards", parent_id="about")

        assert created.depth == 2
        assert created.order == 3

    def test_insert_at_position_shifts_siblings(self, menu_service):
        menu_service.create_menu("web", {"ko": "처음"}, "/first", order=1, menu_id="first")

        roots = [m for m in menu_service.list_menus("web") if m.parent_id == "0"]
        assert [m.id for m in roots] == ["first", "about", "news", "docs-link"]
        assert_consistent(menu_service)

    def test_missing_parent_rejected(self, menu_service):
        with pytest.raises(ReferentialIntegrityException):
            menu_service.create_menu("web", {"ko": "x"}, "/x", parent_id="ghost")

    def test_max_depth_rejected(self, menu_service):
        menu_service.create_menu("web", {"ko": "3"}, "/about/team/x", parent_id="team", menu_id="lvl3")

        with pytest.raises(ValidationException) as exc_info:
            menu_service.create_menu("web", {"ko": "4"}, "/too/deep", parent_id="lvl3")
        assert exc_info.value.code == ErrorCode.MAX_DEPTH_EXCEEDED

    @pytest.mark.parametrize("site,labels,path", [
        ("blog", {"ko": "x"}, "/x"),
        ("web", {"en": "x"}, "/x"),
        ("web", {"ko": "x"}, ""),
    ])
    def test_invalid_payload(self, menu_service, site, labels, path):
        with pytest.raises(ValidationException):
            menu_service.create_menu(site, labels, path)


class TestUpdateMenu:
    """更新测试"""

    def test_path_change_updates_bound_pages(self, menu_service, memory_store):
        """测试 path 变更在同一批次中更新页面 slug"""
        menu_service.update_menu("team", path="/company/team")

        assert memory_store.get("pages", "p-team")["slug"] == "/company/team"
        assert memory_store.get("pages", "p-team-en")["slug"] == "/company/team"
        assert memory_store.get("pages", "p-news")["slug"] == "/news"

    def test_external_link_path_change_no_cascade(self, menu_service, memory_store):
        before = memory_store.list_documents("pages")
        menu_service.update_menu("docs-link", path="https://new.example.com")

        assert memory_store.list_documents("pages") == before

    def test_structural_fields_rejected(self, menu_service):
        for field in ("parent_id", "depth", "order"):
            with pytest.raises(ValidationException):
                menu_service.update_menu("team", **{field: 1})

    def test_disable_cascades_to_children(self, menu_service):
        menu_service.update_menu("about", enabled={"ko": False, "en": False})

        assert menu_service.get_menu("team").enabled["ko"] is False
        assert menu_service.get_menu("history").enabled["ko"] is False

    def test_enable_under_disabled_parent_rejected(self, menu_service):
        with pytest.raises(ValidationException):
            menu_service.update_menu("team", enabled={"ko": True, "en": True})

    def test_no_changes_is_noop(self, menu_service):
        menu = menu_service.get_menu("news")
        assert menu_service.update_menu("news", path="/news") == menu

    @pytest.mark.parametrize("fields", [{"page_type": "bogus"}, {"labels": None}, {"enabled": "yes"}])
    def test_invalid_field_value_rejected(self, menu_service, memory_store, fields):
        """测试字段值不合法时抛出 ValidationException 而不是 pydantic 原始异常"""
        before = memory_store.get("menus", "news")

        with pytest.raises(ValidationException) as exc_info:
            menu_service.update_menu("news", **fields)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.details
        assert memory_store.get("menus", "news") == before

    def test_description_none_clears_field(self, menu_service, memory_store):
        """测试显式传入 description=None 会清除已有描述"""
        menu_service.update_menu("news", description={"ko": "공지사항"})
        assert memory_store.get("menus", "news")["description"] == {"ko": "공지사항"}

        updated = menu_service.update_menu("news", description=None)

        assert updated.description is None
        stored = memory_store.get("menus", "news")
        assert "description" not in stored
        assert stored["site"] == "web"
        assert stored["pageType"] == "notice"
        assert stored["path"] == "/news"


class TestMoveMenu:
    """移动测试"""

    def test_move_into_other_parent(self, menu_service):
        menu_service.move_menu("news", "about", 0)

        news = menu_service.get_menu("news")
        assert (news.parent_id, news.depth, news.order) == ("about", 2, 1)
        assert menu_service.get_menu("docs-link").order == 2
        assert_consistent(menu_service)

    def test_move_subtree_updates_descendant_depth(self, menu_service):
        menu_service.move_menu("about", "news", 0)

        assert menu_service.get_menu("team").depth == 3
        assert_consistent(menu_service)

    def test_move_to_current_position_writes_nothing(self, menu_service):
        assert menu_service.move_menu("news", "0", 1) == []

    def test_cycle_rejected_and_nothing_written(self, menu_service, memory_store):
        before = memory_store.list_documents("menus")

        with pytest.raises(CycleException):
            menu_service.move_menu("about", "team", 0)

        assert memory_store.list_documents("menus") == before

    def test_forbid_reparent_with_children(self, memory_store, tree_settings):
        service = MenuService(
            memory_store,
            tree_settings.model_copy(update={"allow_reparent_with_children": False}),
        )
        with pytest.raises(ValidationException):
            service.move_menu("about", "news", 0)


class TestDeleteMenu:
    """删除测试"""

    def test_refuse_with_children(self, menu_service):
        with pytest.raises(ResourceConflictException) as exc_info:
            menu_service.delete_menu("about")
        assert exc_info.value.code == ErrorCode.HAS_CHILDREN

    def test_refuse_with_bound_pages(self, menu_service):
        with pytest.raises(ResourceConflictException) as exc_info:
            menu_service.delete_menu("team")
        assert exc_info.value.code == ErrorCode.HAS_BOUND_PAGES

    def test_delete_with_pages(self, menu_service, memory_store):
        result = menu_service.delete_menu("team", delete_pages=True)

        assert sorted(result["deleted_pages"]) == ["p-team", "p-team-en"]
        assert memory_store.get("pages", "p-team") is None
        assert menu_service.get_menu("history").order == 1
        assert_consistent(menu_service)

    def test_delete_closes_root_gap(self, menu_service):
        menu_service.delete_menu("docs-link")
        menu_service.create_menu("web", {"ko": "x"}, "/x", menu_id="x")

        assert menu_service.get_menu("x").order == 3
        assert_consistent(menu_service)


class TestBatchFailure:
    """提交失败测试"""

    def test_batch_error_leaves_store_unchanged(self, memory_store, tree_settings, monkeypatch):
        service = MenuService(memory_store, tree_settings)
        before = memory_store.list_documents("menus")

        def failing_commit(mutations):
            raise BatchCommitException("写入超时")

        monkeypatch.setattr(memory_store, "commit", failing_commit)

        with pytest.raises(BatchCommitException):
            service.move_menu("news", "about", 0)

        assert memory_store.list_documents("menus") == before

    def test_works_on_sql_store(self, sql_store, tree_settings):
        service = MenuService(sql_store, tree_settings)
        a = service.create_menu("docs", {"ko": "a"}, "/a", menu_id="a")
        service.create_menu("docs", {"ko": "b"}, "/b", menu_id="b")
        service.create_menu("docs", {"ko": "c"}, "/c", menu_id="c")

        service.move_menu("b", a.id, 0)

        assert [(m.id, m.depth, m.order) for m in service.list_menus("docs")] == [
            ("a", 1, 1), ("b", 2, 1), ("c", 1, 2),
        ]
