"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 内存文档存储 / SQLite 文档存储
- 示例菜单森林
- FastAPI 测试客户端
"""

import os
import tempfile

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from ycms.api import create_category_router, create_menu_router
from ycms.config import TreeSettings
from ycms.exceptions import register_exception_handlers
from ycms.services import CategoryService, MenuService
from ycms.store import MemoryDocumentStore, SqlDocumentStore

from tests.helpers import category, menu, menu_documents, node


# ==================== 基础 Fixtures ====================

@pytest.fixture(scope="session")
def temp_dir():
    """创建临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def temp_file(temp_dir):
    """创建临时文件的工厂函数"""
    created_files = []

    def _create_file(filename: str, content: str = "") -> str:
        filepath = os.path.join(temp_dir, filename)
        if os.path.dirname(filepath):
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
        created_files.append(filepath)
        return filepath

    yield _create_file

    for f in created_files:
        if os.path.exists(f):
            os.remove(f)


@pytest.fixture
def tree_settings():
    return TreeSettings()


# ==================== 示例数据 ====================

@pytest.fixture
def flat_roots():
    """A, B, C 三个顶层节点"""
    return [
        node("A", order=1),
        node("B", order=2),
        node("C", order=3),
    ]


@pytest.fixture
def chain_nodes():
    """A -> B -> C 链"""
    return [
        node("A", order=1),
        node("B", parent="A", depth=2, order=1),
        node("C", parent="B", depth=3, order=1),
    ]


@pytest.fixture
def sample_menus():
    """web 站点菜单:

        about(1)
          ├─ team(1)
          └─ history(2)
        news(2)
        docs-link(3, 外部链接)
    """
    return [
        menu("about", order=1, path="/about", page_type="static"),
        menu("team", parent="about", depth=2, order=1, path="/about/team"),
        menu("history", parent="about", depth=2, order=2, path="/about/history"),
        menu("news", order=2, path="/news", page_type="notice"),
        menu("docs-link", order=3, path="https://docs.example.com", page_type="links"),
    ]


@pytest.fixture
def sample_categories():
    return [category("c1", 1), category("c2", 2), category("c3", 3), category("c4", 4)]


# ==================== 存储 Fixtures ====================

@pytest.fixture
def memory_store(sample_menus, sample_categories):
    """预置菜单、页面、分类、FAQ 的内存存储"""
    return MemoryDocumentStore({
        "menus": menu_documents(*sample_menus),
        "pages": {
            "p-team": {"menuId": "team", "slug": "/about/team", "site": "web"},
            "p-team-en": {"menuId": "team", "slug": "/about/team", "site": "web"},
            "p-news": {"menuId": "news", "slug": "/news", "site": "web"},
        },
        "faqCategories": {c.id: c.to_document() for c in sample_categories},
        "faqs": {
            "f1": {"categoryId": "c2", "question": {"ko": "?"}},
        },
    })


@pytest.fixture(scope="function")
def memory_engine():
    """创建内存数据库引擎

    使用 StaticPool 和 check_same_thread=False 确保所有操作使用同一个连接。
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(memory_engine):
    store = SqlDocumentStore(memory_engine)
    store.create_all()
    return store


# ==================== 服务 / FastAPI Fixtures ====================

@pytest.fixture
def menu_service(memory_store, tree_settings):
    return MenuService(memory_store, tree_settings)


@pytest.fixture
def category_service(memory_store, tree_settings):
    return CategoryService(memory_store, tree_settings)


@pytest.fixture
def app(menu_service, category_service):
    """创建测试用 FastAPI 应用"""
    test_app = FastAPI(title="Test App")
    register_exception_handlers(test_app)
    test_app.include_router(create_menu_router(menu_service), prefix="/menus")
    test_app.include_router(create_category_router(category_service), prefix="/faq-categories")
    return test_app


@pytest.fixture
def client(app):
    """创建测试客户端"""
    return TestClient(app)
