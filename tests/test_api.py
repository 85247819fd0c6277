from __future__ import annotations

from starlette.testclient import TestClient

from app.infra.db import build_engine, build_session_factory
from app.main import create_app


def test_create_fetch_delete_round_trip(client: TestClient) -> None:
    created = client.post(
        "/tasks", json={"title": "  Read docs ", "description": "https://example.com/a/b"}
    )

    assert created.status_code == 201
    task = created.json()["data"]
    assert task["title"] == "Read docs"
    assert task["status"] == "pending"
    assert '"https://example.com/a/b"' in created.text

    fetched = client.get(f"/tasks/{task['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"] == task

    deleted = client.delete(f"/tasks/{task['id']}")
    assert deleted.status_code == 204
    assert deleted.content == b""

    assert client.get(f"/tasks/{task['id']}").status_code == 404


def test_patch_status_only_keeps_other_fields(client: TestClient) -> None:
    task = client.post("/tasks", json={"title": "Keep", "description": "Me"}).json()["data"]

    response = client.patch(f"/tasks/{task['id']}", json={"status": "done"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert (data["title"], data["description"], data["status"]) == ("Keep", "Me", "done")


def test_put_replaces_task(client: TestClient) -> None:
    task = client.post("/tasks", json={"title": "Old", "description": "x"}).json()["data"]

    response = client.put(
        f"/tasks/{task['id']}",
        json={"title": "New", "description": None, "status": "in_progress"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["description"] is None


def test_list_with_pagination(client: TestClient) -> None:
    for n in range(5):
        client.post("/tasks", json={"title": f"Task {n}"})

    response = client.get("/tasks", params={"limit": 2, "page": 2, "sort": "id:ASC"})

    body = response.json()
    assert response.status_code == 200
    assert [t["title"] for t in body["data"]] == ["Task 2", "Task 3"]
    assert body["meta"]["total_pages"] == 3
    assert set(body["links"]) == {"self", "first", "last", "prev", "next"}


def test_malformed_json_returns_400(client: TestClient) -> None:
    response = client.post(
        "/tasks", content=b"{bad json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid JSON: ")


def test_wrong_content_type_returns_415(client: TestClient) -> None:
    response = client.post("/tasks", content=b"title=x", headers={"Content-Type": "text/plain"})

    assert response.status_code == 415


def test_method_not_allowed_lists_methods(client: TestClient) -> None:
    response = client.delete("/tasks")

    assert response.status_code == 405
    assert response.headers["allow"] == "GET, POST"


def test_unknown_path_returns_404(client: TestClient) -> None:
    response = client.get("/nothing/here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_unicode_is_not_escaped(client: TestClient) -> None:
    response = client.post("/tasks", json={"title": "Купить хлеб"})

    assert "Купить хлеб".encode("utf-8") in response.content


def test_storage_fault_returns_generic_500() -> None:
    # Schema never created, so every query fails.
    engine = build_engine("sqlite://")
    client = TestClient(create_app(build_session_factory(engine)))

    response = client.get("/tasks")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}


def test_id_beyond_integer_range_returns_404(client: TestClient) -> None:
    response = client.get("/tasks/99999999999999999999999")

    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


def test_page_far_past_the_end_returns_empty_page(client: TestClient) -> None:
    client.post("/tasks", json={"title": "Only one"})

    response = client.get("/tasks", params={"page": "99999999999999999999", "limit": 10})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["meta"] == {
        "total": 1,
        "page": 99999999999999999999,
        "limit": 10,
        "total_pages": 1,
    }
    assert "next" not in body["links"]
