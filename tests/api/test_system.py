"""Supervision endpoints and error format on unknown routes."""


async def test_health(client):
    res = await client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert res.json()["mission_number_policy"] == "sequential"


async def test_system_status_counts_documents(client, mission):
    res = await client.get("/system/status")

    body = res.json()
    assert body["ok"] is True
    assert body["documents"] == {"missions": 1, "devis": 0, "factures": 0}
    assert body["last_mission"] == mission["num_intervention"]


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/nope", headers={"X-Request-Id": "req-42"})

    assert res.status_code == 404
    body = res.json()
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["error"]["request_id"] == "req-42"
    assert res.headers["X-Request-Id"] == "req-42"
