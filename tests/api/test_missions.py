"""Missions API: numbered creation, initial status, lookups by reference."""

import re
from datetime import date

from fieldops.core.settings import settings
from tests.payloads import mission_payload, rapport_payload

YEAR = date.today().year


async def test_create_assigns_sequential_references(client, client_row):
    first = await client.post("/api/missions", json=mission_payload(client_row.id))
    second = await client.post("/api/missions", json=mission_payload(client_row.id))

    assert first.status_code == 201
    assert first.json()["data"]["num_intervention"] == f"INT-{YEAR}-0001"
    assert second.json()["data"]["num_intervention"] == f"INT-{YEAR}-0002"
    assert first.json()["data"]["client"]["id"] == client_row.id


async def test_initial_status_depends_on_fiche_date(client, client_row):
    past = (await client.post("/api/missions", json=mission_payload(client_row.id, days=-2))).json()["data"]
    future = (await client.post("/api/missions", json=mission_payload(client_row.id, days=10))).json()["data"]

    assert past["statut"] == "en_cours"
    assert future["statut"] == "planifiee"
    assert past["priorite"] == "normale"


async def test_daily_random_policy_is_opt_in(client, client_row, monkeypatch):
    monkeypatch.setattr(settings, "MISSION_NUMBER_POLICY", "daily_random")

    res = await client.post("/api/missions", json=mission_payload(client_row.id))

    assert re.fullmatch(rf"INT-{date.today():%Y%m%d}-\d{{4}}", res.json()["data"]["num_intervention"])


async def test_unknown_client_is_rejected(client):
    res = await client.post("/api/missions", json=mission_payload(999))

    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Client non trouvé"


async def test_client_cannot_choose_the_reference(client, client_row):
    res = await client.post(
        "/api/missions", json=mission_payload(client_row.id, num_intervention="INT-2020-0001")
    )
    assert res.status_code == 422


async def test_get_update_by_reference(client, mission):
    num = mission["num_intervention"]

    res = await client.put(f"/api/missions/{num}", json={"statut": "terminee", "priorite": "urgente"})
    assert res.status_code == 200

    got = (await client.get(f"/api/missions/{num}")).json()["data"]
    assert got["statut"] == "terminee"
    assert got["priorite"] == "urgente"
    assert got["num_intervention"] == num


async def test_list_filters_by_status_and_client(client, client_row):
    await client.post("/api/missions", json=mission_payload(client_row.id, days=-1))
    await client.post("/api/missions", json=mission_payload(client_row.id, days=5))

    res = await client.get("/api/missions", params={"statut": "planifiee", "clientId": client_row.id})

    body = res.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["statut"] == "planifiee"

    other = await client.get("/api/missions", params={"clientId": 999})
    assert other.json()["meta"] == {"total": 0, "page": 1, "limit": 10, "totalPages": 0}


async def test_delete_refused_when_reports_exist(client, mission, technicien_row):
    await client.post("/api/rapports", json=rapport_payload(mission["id"], technicien_row.id))

    res = await client.delete(f"/api/missions/{mission['num_intervention']}")

    assert res.status_code == 400
    assert res.json()["error"]["details"]["rapports"] == 1


async def test_delete_then_not_found(client, mission):
    num = mission["num_intervention"]

    assert (await client.delete(f"/api/missions/{num}")).status_code == 200
    assert (await client.get(f"/api/missions/{num}")).status_code == 404
