from conftest import FakeGeoapify, FakeLLM

from parking_backend.dependencies import get_geoapify


def ids(payload):
    return [spot["id"] for spot in payload["data"]]


def test_missing_query_is_rejected(client):
    response = client.post("/api/ai/query", json={"sessionId": "s1"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required parameter: query"}


def test_blank_query_is_rejected(client):
    response = client.post("/api/ai/query", json={"query": "   "})

    assert response.status_code == 400


def test_cheapest_near_sjsu(client, geoapify):
    response = client.post(
        "/api/ai/query", json={"query": "Find me the cheapest parking near SJSU"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["type"] == "new_search"
    assert body["parsed"]["location"] == "SJSU"
    assert body["parsed"]["pricePreference"] == "cheap"
    assert ids(body) == ["d", "a", "g", "e"]
    assert body["count"] == 4
    assert all(spot["pricing"]["hourly"] <= 3 for spot in body["data"])
    assert all(spot["distance"] is not None for spot in body["data"])
    assert body["aiResponse"].startswith("I found 4 parking spots")
    assert geoapify.address_calls == [("SJSU", 20)]


def test_query_without_location_searches_default_area(client, geoapify):
    response = client.post("/api/ai/query", json={"query": "overnight parking please"})

    assert response.status_code == 200
    assert ids(response.json()) == ["a", "d", "b", "c", "e", "f"]
    assert len(geoapify.radius_calls) == 1
    assert geoapify.address_calls == []


def test_follow_up_reuses_previous_results(client, geoapify, store):
    first = client.post(
        "/api/ai/query", json={"query": "parking near SJSU", "sessionId": "s1"}
    )
    assert first.json()["count"] == 7

    second = client.post(
        "/api/ai/query", json={"query": "which is safest?", "sessionId": "s1"}
    )

    body = second.json()
    assert body["type"] == "follow_up"
    assert body["parsed"] is None
    assert ids(body) == ["d", "b", "f", "c", "g"]
    assert geoapify.call_count == 1
    assert [s.id for s in store.get("s1").last_results] == ids(body)
    assert store.get("s1").last_query == "which is safest?"


def test_refine_narrows_previous_results(client, geoapify):
    client.post("/api/ai/query", json={"query": "parking near SJSU", "sessionId": "s2"})

    response = client.post(
        "/api/ai/query", json={"query": "only the cheap ones", "sessionId": "s2"}
    )

    body = response.json()
    assert body["type"] == "refine"
    assert body["parsed"]["pricePreference"] == "cheap"
    assert ids(body) == ["d", "a", "g", "e"]
    assert geoapify.call_count == 1


def test_sessions_are_isolated(client, geoapify):
    client.post("/api/ai/query", json={"query": "parking near SJSU", "sessionId": "s1"})

    response = client.post(
        "/api/ai/query", json={"query": "which is safest?", "sessionId": "other"}
    )

    assert response.json()["type"] == "new_search"
    assert geoapify.call_count == 2


def test_model_backed_turn(client, llm_holder):
    llm_holder["llm"] = FakeLLM(
        '{"location": "Santana Row", "pricePreference": "any", "features": [], '
        '"maxDistance": 3000, "sortBy": "safety", "limit": 3}',
        "Lot d is free and very safe.",
    )

    response = client.post("/api/ai/query", json={"query": "safe spots at Santana Row"})

    body = response.json()
    assert body["parsed"]["sortBy"] == "safety"
    assert body["aiResponse"] == "Lot d is free and very safe."
    assert ids(body)[0] == "d"


def test_provider_failure_is_a_500(client):
    from parking_backend.main import app

    app.dependency_overrides[get_geoapify] = lambda: FakeGeoapify(error=RuntimeError("down"))

    response = client.post("/api/ai/query", json={"query": "parking near SJSU"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to process AI query"


def test_suggestions(client):
    response = client.get("/api/ai/suggestions")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["suggestions"]) == 6
    assert "Find me the cheapest parking near SJSU" in body["suggestions"]


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
