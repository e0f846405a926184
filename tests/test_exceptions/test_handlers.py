"""全局异常处理器测试

用独立的 FastAPI 应用验证各类异常转换为统一的 JSON 响应。
"""

import pytest
from fastapi import FastAPI, HTTPException, Query
from fastapi.testclient import TestClient

from ycms.exceptions import Err, ErrorCode, register_exception_handlers
from ycms.store import MemoryDocumentStore, Mutation
from ycms.tree import MenuRecord, reparent

from tests.helpers import node


def create_test_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/business")
    def business():
        raise Err.integrity("父菜单不存在", details=["parentId=x"], parent_id="x")

    @app.get("/cycle")
    def cycle():
        nodes = [node("A", order=1), node("B", parent="A", depth=2, order=1)]
        reparent(nodes, "A", "B", 0)

    @app.get("/batch")
    def batch():
        MemoryDocumentStore().commit([Mutation.update("menus", "ghost", {"order": 1})])

    @app.get("/record")
    def record():
        MenuRecord.model_validate({"id": "m", "pageType": "bogus"})

    @app.get("/validate")
    def validate(target_index: int = Query(...)):
        return {"target_index": target_index}

    @app.get("/http")
    def http_error():
        raise HTTPException(status_code=403, detail="禁止访问")

    @app.get("/crash")
    def crash():
        raise RuntimeError("boom")

    return app


@pytest.fixture
def handler_client():
    return TestClient(create_test_app(), raise_server_exceptions=False)


class TestExceptionHandlers:
    """异常处理器测试"""

    def test_business_exception(self, handler_client):
        """测试业务异常的 extra 上下文放入 data"""
        response = handler_client.get("/business")

        assert response.status_code == 409
        assert response.json() == {
            "status": "error",
            "message": "父菜单不存在",
            "msg_details": ["parentId=x"],
            "data": {"parent_id": "x"},
            "error_code": ErrorCode.REFERENTIAL_INTEGRITY.value,
        }

    def test_cycle_exception_context(self, handler_client):
        """测试环检测失败时返回移动的节点和目标父节点"""
        response = handler_client.get("/cycle")

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "TREE_CYCLE"
        assert body["data"] == {"moved_id": "A", "new_parent_id": "B"}
        assert body["msg_details"] == ["A -> B"]

    def test_batch_commit_context(self, handler_client):
        """测试批量提交失败时返回失败的写入位置"""
        response = handler_client.get("/batch")

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "BATCH_COMMIT_FAILED"
        assert body["data"] == {"failed_index": 0, "collection": "menus", "doc_id": "ghost"}
        assert body["msg_details"] == ["第 1 条写入失败: menus/ghost"]

    def test_record_validation(self, handler_client):
        """测试未转换的记录模型校验错误返回 422 而不是 500"""
        response = handler_client.get("/record")

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["msg_details"][0].startswith("pageType")

    def test_request_validation(self, handler_client):
        response = handler_client.get("/validate", params={"target_index": "abc"})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["msg_details"][0].startswith("target_index")

    def test_http_exception(self, handler_client):
        response = handler_client.get("/http")

        assert response.status_code == 403
        assert response.json()["error_code"] == "HTTP_403"

    def test_unhandled_exception(self, handler_client):
        response = handler_client.get("/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "INTERNAL_SERVER_ERROR"
        assert body["data"] == {}
