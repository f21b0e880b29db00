"""
Integration tests for API endpoints.

The store dependency is overridden to a temporary directory seeded with
the sample documents (see conftest.py).
"""

import json

from docstore.config import settings
from docstore.services.document_store import SAMPLE_DOCUMENTS

from conftest import read_document


def log_messages(client) -> list:
    return [e["message"] for e in client.get("/log").json()["entries"]]


class TestFieldEndpoints:
    """Tests for /get, /set and /remove."""

    def test_get_value(self, client):
        response = client.get("/get", params={"file": "scott", "key": "email"})

        assert response.status_code == 200
        assert response.json() == "sroberts@talentpath.com"

    def test_get_unknown_key(self, client):
        response = client.get("/get", params={"file": "scott", "key": "phone"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid key 'phone' in 'scott'"

    def test_get_missing_document(self, client):
        response = client.get("/get", params={"file": "nobody.json", "key": "email"})

        assert response.status_code == 400
        assert "nobody" in response.json()["detail"]

    def test_missing_params_rejected_before_store(self, client):
        response = client.get("/get", params={"file": "scott"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Bad Request"}
        assert log_messages(client) == []

    def test_empty_param_rejected(self, client):
        response = client.patch("/set", params={"file": "scott", "key": "email", "value": ""})

        assert response.status_code == 400
        assert log_messages(client) == []

    def test_set_then_get(self, client):
        response = client.patch(
            "/set", params={"file": "post", "key": "author", "value": "Scott"}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Value set"

        response = client.get("/get", params={"file": "post", "key": "author"})
        assert response.json() == "Scott"

    def test_remove(self, client, seeded_storage):
        response = client.patch("/remove", params={"file": "scott", "key": "username"})

        assert response.status_code == 200
        assert "username" not in read_document(seeded_storage, "scott")

    def test_remove_absent_key_succeeds(self, client):
        response = client.patch("/remove", params={"file": "scott", "key": "nope"})

        assert response.status_code == 200


class TestDocumentEndpoints:
    """Tests for /write, /delete, /get/{file} and /documents."""

    def test_write_creates_empty_document(self, client, seeded_storage):
        response = client.post("/write/notes")

        assert response.status_code == 201
        assert read_document(seeded_storage, "notes") == {}

    def test_write_with_body(self, client, seeded_storage):
        response = client.post("/write/user", json={"firstname": "Sam"})

        assert response.status_code == 201
        assert read_document(seeded_storage, "user") == {"firstname": "Sam"}

    def test_write_rejects_array_body(self, client):
        response = client.post("/write/list", json=["a", "b"])

        assert response.status_code == 400

    def test_write_existing_document(self, client):
        response = client.post("/write/scott")

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot create file, 'scott' already exists"

    def test_delete(self, client, seeded_storage):
        response = client.delete("/delete/andrew")

        assert response.status_code == 200
        assert not (seeded_storage.data_dir / "andrew.json").exists()

        response = client.delete("/delete/andrew")
        assert response.status_code == 400

    def test_get_file(self, client):
        response = client.get("/get/post.json")

        assert response.status_code == 200
        assert response.json() == SAMPLE_DOCUMENTS["post"]

    def test_list_documents(self, client):
        response = client.get("/documents")

        assert response.json() == {"count": 3, "documents": ["andrew", "post", "scott"]}


class TestQueryEndpoints:
    """Tests for /merge and key-set algebra."""

    def test_merge(self, client, seeded_storage):
        response = client.get("/merge")

        assert response.status_code == 200
        assert response.json() == SAMPLE_DOCUMENTS
        snapshot = json.loads(seeded_storage.snapshot_path.read_text(encoding="utf-8"))
        assert snapshot == SAMPLE_DOCUMENTS

    def test_union(self, client):
        response = client.get("/union", params={"fileA": "scott", "fileB": "andrew"})

        assert response.status_code == 200
        assert response.json() == ["firstname", "lastname", "email", "username"]

    def test_intersect(self, client):
        response = client.get("/intersect", params={"fileA": "scott", "fileB": "post"})

        assert response.status_code == 200
        assert response.json() == []

    def test_difference(self, client):
        response = client.get("/difference", params={"fileA": "scott", "fileB": "andrew"})

        assert response.status_code == 200
        assert response.json() == ["username"]

    def test_set_operation_requires_both_files(self, client):
        response = client.get("/union", params={"fileA": "scott"})

        assert response.status_code == 400

    def test_set_operation_on_missing_document(self, client):
        response = client.get("/union", params={"fileA": "scott", "fileB": "ghost"})

        assert response.status_code == 400
        assert "ghost" in response.json()["detail"]


class TestAdminEndpoints:
    """Tests for /log and /admin/reset."""

    def test_log_lists_entries(self, client):
        client.get("/get", params={"file": "scott", "key": "firstname"})
        client.get("/get", params={"file": "scott", "key": "nope"})

        entries = client.get("/log").json()["entries"]

        assert [e["message"] for e in entries] == ["Scott", "Invalid key 'nope' in 'scott'"]
        assert [e["is_error"] for e in entries] == [False, True]

    def test_log_keeps_value_with_carriage_return_on_one_entry(self, client):
        client.patch("/set", params={"file": "scott", "key": "note", "value": "a\rb"})

        entries = client.get("/log").json()["entries"]

        assert [e["message"] for e in entries] == ["scott successfully set note to be a\rb"]

    def test_reset_disabled_by_default(self, client, monkeypatch):
        monkeypatch.setattr(settings, "enable_reset", False)

        assert client.post("/admin/reset").status_code == 404

    def test_reset_when_enabled(self, client, seeded_storage, monkeypatch):
        monkeypatch.setattr(settings, "enable_reset", True)
        client.patch("/set", params={"file": "scott", "key": "username", "value": "x"})

        response = client.post("/admin/reset")

        assert response.status_code == 200
        assert read_document(seeded_storage, "scott") == SAMPLE_DOCUMENTS["scott"]
        assert log_messages(client) == []


class TestMiscEndpoints:
    """Tests for root, status, health and unmatched routes."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_status(self, client):
        body = client.get("/status").json()

        assert body["up"] is True
        assert body["owner"] == settings.status_owner
        assert isinstance(body["timestamp"], int)

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["storage"] == "available"

    def test_readiness(self, client):
        assert client.get("/health/ready").json() == {"status": "ready"}

    def test_unknown_route(self, client):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    def test_wrong_method_is_not_found(self, client):
        response = client.post("/merge")

        assert response.status_code == 404

    def test_metrics(self, client, monkeypatch):
        monkeypatch.setattr(settings, "enable_metrics", True)
        client.get("/get", params={"file": "scott", "key": "email"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "docstore_operations_total" in response.text
