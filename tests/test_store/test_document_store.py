"""文档存储与批量提交测试

内存存储和 SQLite 存储跑同一组用例，验证:
1. set / update / delete 语义
2. 批次原子性：任意一条失败，整批不可见
3. 外键查找与过滤
"""

import pytest
from sqlalchemy.exc import OperationalError

from ycms.config import DatabaseSettings
from ycms.exceptions import BatchCommitException
from ycms.store import (
    BatchCommitCoordinator,
    MemoryDocumentStore,
    Mutation,
    MutationOp,
    SqlDocumentStore,
)
from ycms.tree import MenuRecord, NodeUpdate, OrderUpdate


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryDocumentStore()
    return request.getfixturevalue("sql_store")


def seed(store):
    store.commit([
        Mutation.set("menus", "A", {"parentId": "0", "depth": 1, "order": 1, "site": "web"}),
        Mutation.set("menus", "B", {"parentId": "0", "depth": 1, "order": 2, "site": "web"}),
        Mutation.set("menus", "D", {"parentId": "0", "depth": 1, "order": 1, "site": "docs"}),
        Mutation.set("pages", "p1", {"menuId": "A", "slug": "/a"}),
    ])


class TestDocumentStore:
    """存储基本语义测试"""

    def test_set_and_get(self, store):
        seed(store)
        assert store.get("menus", "A") == {"parentId": "0", "depth": 1, "order": 1, "site": "web"}
        assert store.get("menus", "Z") is None

    def test_update_merges_fields(self, store):
        seed(store)
        store.commit([Mutation.update("menus", "A", {"order": 5})])

        assert store.get("menus", "A")["order"] == 5
        assert store.get("menus", "A")["site"] == "web"

    def test_delete(self, store):
        seed(store)
        store.commit([Mutation.delete("pages", "p1"), Mutation.delete("pages", "missing")])
        assert store.get("pages", "p1") is None

    def test_list_with_filters(self, store):
        seed(store)

        assert {d.id for d in store.list_documents("menus")} == {"A", "B", "D"}
        assert {d.id for d in store.list_documents("menus", {"site": "web"})} == {"A", "B"}
        assert store.list_documents("unknown") == []

    def test_find_by_foreign_key(self, store):
        seed(store)
        assert [d.id for d in store.find_by_foreign_key("pages", "menuId", "A")] == ["p1"]
        assert store.find_by_foreign_key("pages", "menuId", "B") == []

    def test_list_records(self, store):
        seed(store)
        menus = store.list_records(MenuRecord, {"site": "docs"})

        assert len(menus) == 1
        assert menus[0].id == "D"
        assert menus[0].site == "docs"

    def test_failed_batch_is_invisible(self, store):
        """测试批次中一条失败时前面的写入也不生效"""
        seed(store)

        with pytest.raises(BatchCommitException):
            store.commit([
                Mutation.update("menus", "A", {"order": 9}),
                Mutation.update("menus", "ghost", {"order": 1}),
            ])

        assert store.get("menus", "A")["order"] == 1


class TestBatchCommitCoordinator:
    """批量提交协调器测试"""

    def test_apply_planner_output(self, store):
        seed(store)
        batch = BatchCommitCoordinator(store)
        batch.apply_node_updates("menus", [NodeUpdate("B", parent_id="A", depth=2, order=1)])
        batch.apply_order_updates("menus", [OrderUpdate("A", 1)])

        assert len(batch) == 2
        assert batch.commit() == 2
        assert len(batch) == 0
        assert store.get("menus", "B") == {"parentId": "A", "depth": 2, "order": 1, "site": "web"}

    def test_empty_commit(self, store):
        assert BatchCommitCoordinator(store).commit() == 0

    def test_failure_propagates_and_clears(self, store):
        seed(store)
        batch = BatchCommitCoordinator(store).update("menus", "ghost", {"order": 1})

        with pytest.raises(BatchCommitException) as exc_info:
            batch.commit()

        assert exc_info.value.status_code == 503
        assert batch.pending == []

    def test_patch_without_cleared_is_update(self, store):
        seed(store)
        batch = BatchCommitCoordinator(store).patch("menus", "A", {"order": 3})

        assert batch.pending[0].op == MutationOp.UPDATE

    def test_patch_removes_cleared_fields(self, store):
        """测试 cleared 字段从文档中移除，其余字段保留"""
        seed(store)
        store.commit([Mutation.update("menus", "A", {"description": {"ko": "x"}})])

        BatchCommitCoordinator(store).patch("menus", "A", {"order": 3}, cleared=["description"]).commit()

        assert store.get("menus", "A") == {"parentId": "0", "depth": 1, "order": 3, "site": "web"}

    def test_patch_missing_document(self, store):
        with pytest.raises(BatchCommitException):
            BatchCommitCoordinator(store).patch("menus", "ghost", {}, cleared=["description"])


class TestSqlDocumentStore:
    """SQLite 存储专项测试"""

    def test_from_settings(self):
        store = SqlDocumentStore.from_settings(DatabaseSettings(url="sqlite:///:memory:"))
        store.commit([Mutation.set("menus", "A", {"order": 1})])
        assert store.get("menus", "A") == {"order": 1}

    def test_database_error_becomes_batch_error(self, sql_store, monkeypatch):
        """测试数据库异常转换为 BatchCommitException"""
        def broken_apply(session, mutation, index):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(SqlDocumentStore, "_apply", staticmethod(broken_apply))

        with pytest.raises(BatchCommitException):
            sql_store.commit([Mutation.set("menus", "A", {"order": 1})])

    def test_drop_and_recreate(self, sql_store):
        sql_store.commit([Mutation.set("menus", "A", {"order": 1})])

        sql_store.drop_all()
        sql_store.create_all()

        assert sql_store.list_documents("menus") == []
