"""
SmartTodo Backend - Todo Items API Tests
=========================================

What:  End-to-end HTTP tests: middleware → routes → dispatcher → handlers,
       with the in-memory store standing in for the database.

What we test:
    ✅ CRUD happy paths with status codes, Location header and camelCase JSON
    ✅ Validation failures as 400 application/problem+json with errors
    ✅ Unknown ids as 404 with the resource in detail
    ✅ Malformed input (bad JSON, bad UUID, bad query type) as 400
    ✅ Unclassified failures as 500 with the generic detail
    ✅ Health endpoint
"""

import uuid
from datetime import date, timedelta

import pytest

from smarttodo.problem_details import GENERIC_ERROR_DETAIL

PROBLEM_JSON = "application/problem+json"


def future(days=30):
    return (date.today() + timedelta(days=days)).isoformat()


async def create(client, title="Buy milk", **extra):
    response = await client.post("/api/todoitems", json={"title": title, **extra})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_returns_201_with_location(self, test_client, memory_store):
        response = await test_client.post(
            "/api/todoitems",
            json={"title": "Buy milk", "description": "2 litres", "dueDate": future()},
        )

        assert response.status_code == 201
        item_id = response.json()
        assert uuid.UUID(item_id) in memory_store.items
        assert response.headers["location"] == f"/api/todoitems/{item_id}"

    @pytest.mark.asyncio
    async def test_empty_title_is_validation_problem(self, test_client, memory_store):
        response = await test_client.post(
            "/api/todoitems",
            json={"title": ""},
            headers={"X-Correlation-ID": "corr-400"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"] == PROBLEM_JSON
        body = response.json()
        assert body["type"] == "https://tools.ietf.org/html/rfc7231#section-6.5.1"
        assert body["title"] == "One or more validation errors occurred."
        assert body["status"] == 400
        assert "detail" not in body
        assert body["errors"] == {
            "Title": ["Title is required", "Title must be at least 3 characters"]
        }
        assert body["correlationId"] == "corr-400"
        assert body["traceId"]
        assert not memory_store.touched

    @pytest.mark.asyncio
    async def test_past_due_date(self, test_client):
        response = await test_client.post(
            "/api/todoitems", json={"title": "Valid", "dueDate": "2000-01-01"}
        )
        assert response.status_code == 400
        assert response.json()["errors"] == {
            "DueDate": ["Due date must be today or in the future"]
        }

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/api/todoitems",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.headers["content-type"] == PROBLEM_JSON
        assert response.json()["errors"]

    @pytest.mark.asyncio
    async def test_bad_due_date_format(self, test_client):
        response = await test_client.post(
            "/api/todoitems", json={"title": "Valid", "dueDate": "next tuesday"}
        )
        assert response.status_code == 400
        assert "DueDate" in response.json()["errors"]


class TestRead:
    @pytest.mark.asyncio
    async def test_get_by_id_camel_case(self, test_client):
        item_id = await create(test_client, title="Read book", dueDate=future())

        response = await test_client.get(f"/api/todoitems/{item_id}")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {
            "id",
            "title",
            "description",
            "status",
            "dueDate",
            "createdAt",
            "updatedAt",
        }
        assert body["id"] == item_id
        assert body["title"] == "Read book"
        assert body["status"] == 0

    @pytest.mark.asyncio
    async def test_get_unknown_is_404(self, test_client):
        missing = uuid.uuid4()
        response = await test_client.get(f"/api/todoitems/{missing}")

        assert response.status_code == 404
        assert response.headers["content-type"] == PROBLEM_JSON
        body = response.json()
        assert body["type"] == "https://tools.ietf.org/html/rfc7231#section-6.5.4"
        assert body["title"] == "The specified resource was not found."
        assert "TodoItem" in body["detail"]
        assert str(missing) in body["detail"]

    @pytest.mark.asyncio
    async def test_get_non_uuid_is_400(self, test_client):
        response = await test_client.get("/api/todoitems/not-a-uuid")
        assert response.status_code == 400
        assert "Id" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_list_and_filter(self, test_client):
        first = await create(test_client, title="First")
        second = await create(test_client, title="Second")
        await test_client.patch(f"/api/todoitems/{first}/complete")

        everything = (await test_client.get("/api/todoitems")).json()
        pending = (await test_client.get("/api/todoitems", params={"status": 0})).json()
        completed = (await test_client.get("/api/todoitems", params={"status": 1})).json()

        assert {i["id"] for i in everything} == {first, second}
        assert [i["id"] for i in pending] == [second]
        assert [i["id"] for i in completed] == [first]

    @pytest.mark.asyncio
    async def test_list_invalid_status(self, test_client):
        response = await test_client.get("/api/todoitems", params={"status": 5})
        assert response.status_code == 400
        assert response.json()["errors"] == {
            "Status": ["Status must be a valid TodoStatus value (0 = Pending, 1 = Completed)"]
        }


class TestUpdate:
    @pytest.mark.asyncio
    async def test_put_updates_and_completes(self, test_client):
        item_id = await create(test_client, title="Draft")

        response = await test_client.put(
            f"/api/todoitems/{item_id}",
            json={"title": "Final", "description": "done", "status": 1},
        )
        assert response.status_code == 200

        body = (await test_client.get(f"/api/todoitems/{item_id}")).json()
        assert body["title"] == "Final"
        assert body["description"] == "done"
        assert body["status"] == 1

    @pytest.mark.asyncio
    async def test_put_whitespace_title(self, test_client):
        item_id = await create(test_client)
        response = await test_client.put(f"/api/todoitems/{item_id}", json={"title": "    "})
        assert response.status_code == 400
        assert response.json()["errors"] == {"Title": ["Title is required"]}

    @pytest.mark.asyncio
    async def test_put_unknown_is_404(self, test_client):
        response = await test_client.put(f"/api/todoitems/{uuid.uuid4()}", json={"title": "Valid"})
        assert response.status_code == 404


class TestComplete:
    @pytest.mark.asyncio
    async def test_complete_then_complete_again(self, test_client):
        item_id = await create(test_client)

        first = await test_client.patch(f"/api/todoitems/{item_id}/complete")
        second = await test_client.patch(f"/api/todoitems/{item_id}/complete")

        assert first.status_code == 200
        assert second.status_code == 500
        assert second.headers["content-type"] == PROBLEM_JSON
        body = second.json()
        assert body["title"] == "An error occurred while processing your request."
        assert body["detail"] == GENERIC_ERROR_DETAIL


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_then_get(self, test_client):
        item_id = await create(test_client)

        deleted = await test_client.delete(f"/api/todoitems/{item_id}")
        assert deleted.status_code == 204
        assert deleted.content == b""

        assert (await test_client.get(f"/api/todoitems/{item_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_is_404(self, test_client):
        response = await test_client.delete(f"/api/todoitems/{uuid.uuid4()}")
        assert response.status_code == 404


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
