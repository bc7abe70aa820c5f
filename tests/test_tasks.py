import pytest


async def create_task(client, headers, **fields):
    response = await client.post("/api/tasks", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["task"]


@pytest.mark.asyncio
async def test_create_then_get_round_trip(client, alice):
    created = await create_task(client, alice["headers"], title="Buy milk", priority="high")

    response = await client.get(f"/api/tasks/{created['id']}", headers=alice["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    task = body["task"]
    assert task["title"] == "Buy milk"
    assert task["priority"] == "high"
    assert task["status"] == "pending"
    assert task["description"] is None
    assert task["user"] == alice["user"]["id"]
    assert task["createdAt"]
    assert task["updatedAt"]


@pytest.mark.asyncio
async def test_create_trims_title(client, alice):
    task = await create_task(client, alice["headers"], title="  Water plants  ")

    assert task["title"] == "Water plants"
    assert task["priority"] == "medium"


@pytest.mark.asyncio
async def test_task_routes_require_auth(client):
    assert (await client.get("/api/tasks")).status_code == 401
    assert (await client.post("/api/tasks", json={"title": "x"})).status_code == 401
    assert (await client.get("/api/tasks/abc")).status_code == 401


@pytest.mark.asyncio
async def test_invalid_task_lists_offending_fields_and_is_not_persisted(client, alice):
    response = await client.post(
        "/api/tasks",
        json={"title": "", "status": "bogus", "priority": "high"},
        headers=alice["headers"],
    )

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {e["field"] for e in body["errors"]} == {"title", "status"}

    listing = await client.get("/api/tasks", headers=alice["headers"])
    assert listing.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_description_length_is_limited(client, alice):
    response = await client.post(
        "/api/tasks",
        json={"title": "Essay", "description": "x" * 501},
        headers=alice["headers"],
    )

    assert response.status_code == 422
    assert [e["field"] for e in response.json()["errors"]] == ["description"]


@pytest.mark.asyncio
async def test_pagination(client, alice):
    for i in range(25):
        await create_task(client, alice["headers"], title=f"Task {i}")

    first = await client.get("/api/tasks?page=1&limit=10", headers=alice["headers"])
    last = await client.get("/api/tasks?page=3&limit=10", headers=alice["headers"])

    assert first.status_code == 200
    assert first.json()["count"] == 10
    assert len(first.json()["tasks"]) == 10
    assert first.json()["pagination"] == {"current": 1, "pages": 3, "total": 25}
    assert len(last.json()["tasks"]) == 5
    assert last.json()["pagination"]["current"] == 3


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(client, alice):
    await create_task(client, alice["headers"], title="Only one")

    response = await client.get("/api/tasks?page=5", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["tasks"] == []
    assert response.json()["pagination"] == {"current": 5, "pages": 1, "total": 1}


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(client, alice):
    await create_task(client, alice["headers"], title="Groceries")
    await create_task(client, alice["headers"], title="Gym")

    response = await client.get("/api/tasks?search=gro", headers=alice["headers"])

    titles = [t["title"] for t in response.json()["tasks"]]
    assert titles == ["Groceries"]


@pytest.mark.asyncio
async def test_search_matches_description_and_treats_wildcards_literally(client, alice):
    await create_task(client, alice["headers"], title="Report", description="Finish 100% of it")
    await create_task(client, alice["headers"], title="Other", description="Nothing here")

    by_description = await client.get("/api/tasks?search=FINISH", headers=alice["headers"])
    by_percent = await client.get("/api/tasks?search=%25", headers=alice["headers"])

    assert [t["title"] for t in by_description.json()["tasks"]] == ["Report"]
    assert [t["title"] for t in by_percent.json()["tasks"]] == ["Report"]


@pytest.mark.asyncio
async def test_filter_by_status_and_priority(client, alice):
    await create_task(client, alice["headers"], title="A", status="completed", priority="low")
    await create_task(client, alice["headers"], title="B", status="completed", priority="high")
    await create_task(client, alice["headers"], title="C", status="pending", priority="high")

    response = await client.get(
        "/api/tasks?status=completed&priority=high", headers=alice["headers"]
    )

    assert [t["title"] for t in response.json()["tasks"]] == ["B"]


@pytest.mark.asyncio
async def test_sorting(client, alice):
    for title in ["banana", "apple", "cherry"]:
        await create_task(client, alice["headers"], title=title)

    default = await client.get("/api/tasks", headers=alice["headers"])
    by_title = await client.get(
        "/api/tasks?sortBy=title&sortOrder=asc", headers=alice["headers"]
    )

    assert [t["title"] for t in default.json()["tasks"]] == ["cherry", "apple", "banana"]
    assert [t["title"] for t in by_title.json()["tasks"]] == ["apple", "banana", "cherry"]


@pytest.mark.asyncio
async def test_invalid_query_parameters(client, alice):
    response = await client.get(
        "/api/tasks?page=0&status=bogus&sortBy=password", headers=alice["headers"]
    )

    assert response.status_code == 422
    assert {e["field"] for e in response.json()["errors"]} == {"page", "status", "sortBy"}


@pytest.mark.asyncio
async def test_list_bounds_on_limit_and_search(client, alice):
    long_search = "x" * 101
    response = await client.get(
        f"/api/tasks?limit=101&search={long_search}&sortOrder=up", headers=alice["headers"]
    )

    assert response.status_code == 422
    assert {e["field"] for e in response.json()["errors"]} == {"limit", "search", "sortOrder"}


@pytest.mark.asyncio
async def test_partial_update(client, alice):
    task = await create_task(
        client, alice["headers"], title="Write report", description="Q3 numbers"
    )

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"status": "in-progress"},
        headers=alice["headers"],
    )

    assert response.status_code == 200
    updated = response.json()["task"]
    assert updated["status"] == "in-progress"
    assert updated["title"] == "Write report"
    assert updated["description"] == "Q3 numbers"
    assert updated["priority"] == "medium"


@pytest.mark.asyncio
async def test_update_is_validated(client, alice):
    task = await create_task(client, alice["headers"], title="Stretch")

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"title": None, "priority": "urgent"},
        headers=alice["headers"],
    )

    assert response.status_code == 422
    assert {e["field"] for e in response.json()["errors"]} == {"title", "priority"}

    unchanged = await client.get(f"/api/tasks/{task['id']}", headers=alice["headers"])
    assert unchanged.json()["task"]["title"] == "Stretch"


@pytest.mark.asyncio
async def test_update_can_clear_description(client, alice):
    task = await create_task(client, alice["headers"], title="Read", description="Chapter 4")

    response = await client.put(
        f"/api/tasks/{task['id']}", json={"description": None}, headers=alice["headers"]
    )

    assert response.status_code == 200
    assert response.json()["task"]["description"] is None


@pytest.mark.asyncio
async def test_delete(client, alice):
    task = await create_task(client, alice["headers"], title="Temporary")

    response = await client.delete(f"/api/tasks/{task['id']}", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Task deleted successfully"}
    missing = await client.get(f"/api/tasks/{task['id']}", headers=alice["headers"])
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_unknown_task_is_not_found(client, alice):
    response = await client.get("/api/tasks/does-not-exist", headers=alice["headers"])

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Task not found"}


@pytest.mark.asyncio
async def test_other_users_tasks_are_invisible(client, alice, bob):
    task = await create_task(client, alice["headers"], title="Alice's secret")
    url = f"/api/tasks/{task['id']}"

    get = await client.get(url, headers=bob["headers"])
    put = await client.put(url, json={"title": "Hijacked"}, headers=bob["headers"])
    delete = await client.delete(url, headers=bob["headers"])
    listing = await client.get("/api/tasks", headers=bob["headers"])

    unknown = await client.get("/api/tasks/does-not-exist", headers=bob["headers"])
    for response in (get, put, delete):
        assert response.status_code == 404
        assert response.json() == unknown.json()
    assert listing.json()["tasks"] == []

    still_there = await client.get(url, headers=alice["headers"])
    assert still_there.status_code == 200
    assert still_there.json()["task"]["title"] == "Alice's secret"
