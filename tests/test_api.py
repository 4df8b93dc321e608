import httpx
from fastapi.testclient import TestClient

from conftest import install_backend, ok
from main import app


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["status"] == "healthy"
    assert data["data"]["cache_entries"] == 0


def test_dashboard_is_served_from_cache(client, backend_stub):
    backend_stub.add("GET", "/kader/dashboard", ok({"total_children": 7}))

    first = client.get("/api/v1/kader/dashboard")
    second = client.get("/api/v1/kader/dashboard")

    assert first.status_code == second.status_code == 200
    assert first.json()["data"] == second.json()["data"] == {"total_children": 7}
    assert len(backend_stub.calls("GET", "/kader/dashboard")) == 1


def test_refresh_forces_backend_fetch(client, backend_stub):
    backend_stub.add("GET", "/kader/dashboard", ok({"total_children": 7}))

    client.get("/api/v1/kader/dashboard")
    client.get("/api/v1/kader/dashboard", params={"refresh": "true"})

    assert len(backend_stub.calls("GET", "/kader/dashboard")) == 2


def test_child_filters_are_cached_separately(client, backend_stub):
    backend_stub.add("GET", "/kader/children", ok([]))

    client.get("/api/v1/kader/children", params={"page": 1})
    client.get("/api/v1/kader/children", params={"page": 2})
    client.get("/api/v1/kader/children", params={"page": 1})

    calls = backend_stub.calls("GET", "/kader/children")
    assert len(calls) == 2
    assert calls[1].url.params["page"] == "2"


def test_search_values_differing_only_in_separators_are_cached_apart(
    client, backend_stub
):
    backend_stub.add("GET", "/kader/children", ok(["space"]), ok(["hyphen"]))

    spaced = client.get("/api/v1/kader/children", params={"search": "siti aminah"})
    hyphenated = client.get("/api/v1/kader/children", params={"search": "siti-aminah"})

    assert spaced.json()["data"] == ["space"]
    assert hyphenated.json()["data"] == ["hyphen"]
    calls = backend_stub.calls("GET", "/kader/children")
    assert [c.url.params["search"] for c in calls] == ["siti aminah", "siti-aminah"]


def test_activity_log_actions_are_case_sensitive_keys(client, backend_stub):
    backend_stub.add("GET", "/admin/activity-logs", ok(["lower"]), ok(["upper"]))

    client.get("/api/v1/admin/activity-logs", params={"action": "login"})
    upper = client.get("/api/v1/admin/activity-logs", params={"action": "LOGIN"})

    assert upper.json()["data"] == ["upper"]
    assert len(backend_stub.calls("GET", "/admin/activity-logs")) == 2


def test_priority_route_not_shadowed_by_child_id(client, backend_stub):
    backend_stub.add("GET", "/kader/children/priorities", ok([{"id": 3}]))

    response = client.get("/api/v1/kader/children/priorities")

    assert response.status_code == 200
    assert response.json()["data"] == [{"id": 3}]


def test_update_child_invalidates_related_entries(client, backend_stub):
    backend_stub.add("GET", "/kader/children/5", ok({"id": 5, "full_name": "Ayu"}))
    backend_stub.add("GET", "/kader/children", ok([{"id": 5}]))
    backend_stub.add(
        "PUT", "/kader/children/5", ok({"id": 5, "full_name": "Ayu Lestari"})
    )

    client.get("/api/v1/kader/children/5")
    client.get("/api/v1/kader/children")
    response = client.put("/api/v1/kader/children/5", json={"full_name": "Ayu Lestari"})
    assert response.status_code == 200

    client.get("/api/v1/kader/children/5")
    client.get("/api/v1/kader/children")
    assert len(backend_stub.calls("GET", "/kader/children/5")) == 2
    assert len(backend_stub.calls("GET", "/kader/children")) == 2


def test_failed_mutation_keeps_cached_entries(client, backend_stub):
    backend_stub.add("GET", "/kader/children/5", ok({"id": 5}))
    backend_stub.add(
        "DELETE",
        "/kader/children/5",
        httpx.Response(403, json={"success": False, "message": "Unauthorized access."}),
    )

    client.get("/api/v1/kader/children/5")
    response = client.delete("/api/v1/kader/children/5")

    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized access."
    client.get("/api/v1/kader/children/5")
    assert len(backend_stub.calls("GET", "/kader/children/5")) == 1


def test_create_child_validation(client, backend_stub):
    response = client.post(
        "/api/v1/kader/children",
        json={"full_name": "Bima", "birth_date": "2024-02-01", "gender": "X"},
    )

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert "gender" in response.json()["data"]["errors"]
    assert backend_stub.calls("POST", "/kader/children") == []


def test_create_child_forwards_payload(client, backend_stub):
    backend_stub.add("POST", "/kader/children", ok({"id": 9}))

    response = client.post(
        "/api/v1/kader/children",
        json={
            "full_name": "Bima",
            "birth_date": "2024-02-01",
            "gender": "L",
            "parent_name": "Sari",
        },
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"id": 9}
    sent = backend_stub.calls("POST", "/kader/children")[0]
    assert b'"birth_date":"2024-02-01"' in sent.content.replace(b" ", b"")


def test_backend_failure_is_not_cached(client, backend_stub):
    backend_stub.add(
        "GET",
        "/admin/activity-logs",
        httpx.ConnectError("refused"),
        ok([{"id": 1, "action": "login"}]),
    )

    failed = client.get("/api/v1/admin/activity-logs")
    assert failed.status_code == 502
    assert failed.json()["success"] is False

    retried = client.get("/api/v1/admin/activity-logs")
    assert retried.status_code == 200
    assert retried.json()["data"] == [{"id": 1, "action": "login"}]


def test_consultation_message_invalidates_lists(client, backend_stub):
    backend_stub.add("GET", "/kader/consultations", ok([]))
    backend_stub.add("GET", "/kader/consultations/4", ok({"id": 4, "messages": []}))
    backend_stub.add("POST", "/kader/consultations/4/messages", ok({"id": 11}))

    client.get("/api/v1/kader/consultations", params={"status": "open"})
    client.get("/api/v1/kader/consultations/4")
    response = client.post(
        "/api/v1/kader/consultations/4/messages", json={"message": "Sudah ditimbang?"}
    )
    assert response.status_code == 200

    client.get("/api/v1/kader/consultations", params={"status": "open"})
    client.get("/api/v1/kader/consultations/4")
    listing = backend_stub.calls("GET", "/kader/consultations")
    assert len(listing) == 2
    assert listing[-1].url.params["status"] == "open"
    assert len(backend_stub.calls("GET", "/kader/consultations/4")) == 2


def test_pmt_log_invalidates_only_that_child(client, backend_stub):
    backend_stub.add("GET", "/pmt-logs/child/1", ok([]))
    backend_stub.add("GET", "/pmt-logs/child/12", ok([]))
    backend_stub.add("POST", "/pmt-logs", ok({"id": 1}))

    client.get("/api/v1/children/1/pmt-logs")
    client.get("/api/v1/children/12/pmt-logs")
    response = client.post(
        "/api/v1/pmt-logs",
        json={"child_id": 1, "date": "2025-12-03", "status": "consumed"},
    )
    assert response.status_code == 200

    client.get("/api/v1/children/1/pmt-logs")
    client.get("/api/v1/children/12/pmt-logs")
    assert len(backend_stub.calls("GET", "/pmt-logs/child/1")) == 2
    assert len(backend_stub.calls("GET", "/pmt-logs/child/12")) == 1


def test_meal_log_create_invalidates_journal(client, backend_stub):
    backend_stub.add("GET", "/meal-logs/child/2", ok([]))
    backend_stub.add("POST", "/meal-logs", ok({"id": 30}))

    client.get("/api/v1/children/2/meal-logs")
    response = client.post(
        "/api/v1/meal-logs",
        json={
            "child_id": 2,
            "eaten_at": "2025-12-03T07:30:00",
            "time_of_day": "pagi",
            "description": "Bubur kacang hijau",
        },
    )
    assert response.status_code == 200
    client.get("/api/v1/children/2/meal-logs")
    assert len(backend_stub.calls("GET", "/meal-logs/child/2")) == 2


def test_posyandu_toggle_invalidates_every_filter(client, backend_stub):
    backend_stub.add("GET", "/admin/posyandus", ok([]))
    backend_stub.add(
        "PATCH", "/admin/posyandus/3/toggle-active", ok({"id": 3, "is_active": False})
    )

    client.get("/api/v1/admin/posyandus")
    client.get("/api/v1/admin/posyandus", params={"status": "active"})
    client.patch("/api/v1/admin/posyandus/3/toggle-active")
    client.get("/api/v1/admin/posyandus")
    client.get("/api/v1/admin/posyandus", params={"status": "active"})

    assert len(backend_stub.calls("GET", "/admin/posyandus")) == 4


def test_cache_endpoints(client, backend_stub):
    backend_stub.add("GET", "/kader/dashboard", ok({}))
    backend_stub.add("GET", "/kader/children/priorities", ok([]))
    client.get("/api/v1/kader/dashboard")
    client.get("/api/v1/kader/children/priorities")

    stats = client.get("/api/v1/cache/stats").json()["data"]
    assert stats["keys"] == ["kader_dashboard", "kader_priority_children"]

    client.delete("/api/v1/cache/kader_dashboard")
    stats = client.get("/api/v1/cache/stats").json()["data"]
    assert stats["keys"] == ["kader_priority_children"]

    cleared = client.delete("/api/v1/cache").json()
    assert cleared["data"] == {"removed": 1}
    assert client.get("/api/v1/cache/stats").json()["data"]["entries"] == 0

    swept = client.post("/api/v1/cache/sweep").json()
    assert swept["data"] == {"removed": 0}


def test_cache_prefix_invalidation_endpoint(client, backend_stub):
    backend_stub.add("GET", "/kader/children", ok([]))
    client.get("/api/v1/kader/children", params={"page": 1})
    client.get("/api/v1/kader/children", params={"page": 2})

    response = client.delete("/api/v1/cache", params={"prefix": "kader_children"})

    assert response.json()["data"] == {"removed": 2}


def test_shutdown_closes_every_backend_client(backend_stub):
    with TestClient(app) as c:
        startup_backend = app.state.backend
        installed = install_backend(c, backend_stub)
        assert app.state.fetcher.backend is installed
    assert startup_backend.is_closed
    assert installed.is_closed
