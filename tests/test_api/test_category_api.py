"""FAQ 分类 API 测试"""


def listed_ids(client):
    return [c["id"] for c in client.get("/faq-categories/list").json()["data"]]


class TestCategoryApi:
    """FAQ 分类接口测试"""

    def test_list(self, client):
        body = client.get("/faq-categories/list").json()

        assert body["status"] == "success"
        assert [c["order"] for c in body["data"]] == [1, 2, 3, 4]

    def test_get_not_found(self, client):
        response = client.get("/faq-categories/get", params={"category_id": "ghost"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"

    def test_create_at_front(self, client):
        response = client.post("/faq-categories/create", json={"name": {"ko": "공지"}, "order": 1})

        assert response.status_code == 200
        new_id = response.json()["data"]["id"]
        assert listed_ids(client) == [new_id, "c1", "c2", "c3", "c4"]

    def test_create_order_below_one(self, client):
        response = client.post("/faq-categories/create", json={"name": {"ko": "x"}, "order": 0})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_update_order(self, client):
        response = client.post(
            "/faq-categories/update",
            params={"category_id": "c3"},
            json={"order": 1},
        )

        assert response.status_code == 200
        assert response.json()["data"]["order"] == 1
        assert listed_ids(client) == ["c3", "c1", "c2", "c4"]

    def test_update_order_out_of_range(self, client):
        response = client.post(
            "/faq-categories/update",
            params={"category_id": "c3"},
            json={"order": 10},
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_PARAMETER"

    def test_delete_in_use(self, client):
        response = client.post("/faq-categories/delete", params={"category_id": "c2"})

        assert response.status_code == 409
        assert response.json()["error_code"] == "CATEGORY_IN_USE"

    def test_delete(self, client):
        response = client.post("/faq-categories/delete", params={"category_id": "c1"})

        assert response.status_code == 200
        assert response.json()["data"]["shifted"] == [
            {"id": "c2", "order": 1},
            {"id": "c3", "order": 2},
            {"id": "c4", "order": 3},
        ]

    def test_reorder_requires_all_ids(self, client):
        response = client.post("/faq-categories/reorder", json={"ids": ["c2", "c1"]})

        assert response.status_code == 422

    def test_reorder(self, client):
        response = client.post("/faq-categories/reorder", json={"ids": ["c4", "c3", "c2", "c1"]})

        assert response.status_code == 200
        assert listed_ids(client) == ["c4", "c3", "c2", "c1"]

    def test_update_null_name(self, client):
        """测试 name 显式传 null 返回 422 而不是 500"""
        response = client.post(
            "/faq-categories/update",
            params={"category_id": "c1"},
            json={"name": None},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["data"] == {"category_id": "c1"}
