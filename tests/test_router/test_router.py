"""Tests for the request router."""

import pytest

from people_dao.errors import StorageError
from people_dao.router import Router


def _create(router, name="Ana", email="ana@x.com", **extra):
    resp = router.dispatch("POST", "/people", body={"name": name, "email": email, **extra})
    assert resp.status == 201
    return resp.body["data"]


class TestCollection:
    def test_list_empty(self, router):
        resp = router.dispatch("GET", "/people")
        assert resp.status == 200
        assert resp.body["data"] == []
        assert resp.body["cache"] == {"size": 0, "keys": []}

    def test_create_and_list(self, router):
        created = _create(router, birth_date="1990-05-15")
        assert created["birth_date"] == "1990-05-15"
        assert isinstance(created["created_at"], str)
        listed = router.dispatch("GET", "/people").body["data"]
        assert listed == [created]

    def test_create_validation_error_is_400(self, router):
        resp = router.dispatch("POST", "/people", body={"name": "Ana"})
        assert resp.status == 400
        assert "email" in resp.body["error"]

    def test_create_without_body_is_400(self, router):
        assert router.dispatch("POST", "/people").status == 400

    def test_duplicate_email_is_409(self, router):
        _create(router)
        resp = router.dispatch("POST", "/people", body={"name": "B", "email": "ana@x.com"})
        assert resp.status == 409

    def test_method_not_allowed(self, router):
        assert router.dispatch("DELETE", "/people").status == 405


class TestItem:
    def test_get_by_id(self, router):
        created = _create(router)
        resp = router.dispatch("GET", f"/people/{created['id']}")
        assert resp.status == 200
        assert resp.body == {"data": created}

    def test_get_missing_is_404(self, router):
        resp = router.dispatch("GET", "/people/missing")
        assert resp.status == 404
        assert "error" in resp.body

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "put"])
    def test_update(self, router, method):
        created = _create(router)
        resp = router.dispatch(method, f"/people/{created['id']}", body={"phone": "123"})
        assert resp.status == 200
        assert resp.body["data"]["phone"] == "123"

    def test_update_missing_is_404(self, router):
        resp = router.dispatch("PUT", "/people/missing", body={"phone": "123"})
        assert resp.status == 404

    def test_update_email_is_400(self, router):
        created = _create(router)
        resp = router.dispatch("PUT", f"/people/{created['id']}", body={"email": "b@x.com"})
        assert resp.status == 400

    def test_delete(self, router):
        created = _create(router)
        resp = router.dispatch("DELETE", f"/people/{created['id']}")
        assert resp.status == 200
        assert resp.body == {"success": True}
        assert router.dispatch("GET", f"/people/{created['id']}").status == 404

    def test_delete_missing_is_404(self, router):
        assert router.dispatch("DELETE", "/people/missing").status == 404


class TestSearch:
    def test_search_by_email_attaches_cache_stats(self, router):
        created = _create(router)
        query = {"search": "email", "value": "ana@x.com"}
        first = router.dispatch("GET", "/people", query=query)
        assert first.status == 200
        assert first.body["data"] == created
        assert first.body["cache"]["size"] == 1
        assert len(first.body["cache"]["keys"][0]) == 16

        second = router.dispatch("GET", "/people", query=query)
        assert second.body == first.body

    def test_search_by_phone(self, router):
        created = _create(router, phone="11999998888")
        resp = router.dispatch(
            "GET", "/people", query={"search": "phone", "value": "11999998888"}
        )
        assert resp.body["data"]["id"] == created["id"]

    def test_search_by_name_returns_list(self, router):
        _create(router, name="Ana Souza")
        resp = router.dispatch("GET", "/people", query={"search": "name", "value": "souza"})
        assert [p["name"] for p in resp.body["data"]] == ["Ana Souza"]

    def test_search_not_found_is_empty_result(self, router):
        resp = router.dispatch("GET", "/people", query={"search": "email", "value": "no@x.com"})
        assert resp.status == 200
        assert resp.body["data"] is None

    def test_invalid_search_type(self, router):
        resp = router.dispatch("GET", "/people", query={"search": "age", "value": "3"})
        assert resp.status == 400

    def test_search_requires_value(self, router):
        assert router.dispatch("GET", "/people", query={"search": "email"}).status == 400

    def test_write_clears_cache_stats(self, router):
        created = _create(router)
        router.dispatch("GET", "/people", query={"search": "email", "value": "ana@x.com"})
        router.dispatch("PUT", f"/people/{created['id']}", body={"phone": "1"})
        resp = router.dispatch("GET", "/people")
        assert resp.body["cache"]["size"] == 0


class TestRouting:
    def test_options(self, router):
        resp = router.dispatch("OPTIONS", "/people")
        assert resp.status == 204
        assert resp.body is None

    @pytest.mark.parametrize("path", ["/", "/other", "/people/a/b"])
    def test_unknown_path_is_404(self, router, path):
        assert router.dispatch("GET", path).status == 404

    def test_trailing_slash(self, router):
        assert router.dispatch("GET", "/people/").status == 200

    def test_cache_stats_can_be_omitted(self, dao):
        resp = Router(dao, include_cache_stats=False).dispatch("GET", "/people")
        assert "cache" not in resp.body

    def test_storage_error_is_500(self, dao, monkeypatch):
        def fail():
            raise StorageError("database is locked")

        monkeypatch.setattr(dao, "list_all", fail)
        resp = Router(dao).dispatch("GET", "/people")
        assert resp.status == 500
        assert resp.body == {"error": "database is locked"}
