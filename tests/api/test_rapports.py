"""Rapports API: images, validation decisions, filters."""

from tests.payloads import rapport_payload


async def test_create_orders_images(client, mission, technicien_row):
    body = rapport_payload(
        mission["id"],
        technicien_row.id,
        images=[{"url": "https://cdn.example.com/avant.jpg"}, {"url": "https://cdn.example.com/apres.jpg"}],
    )

    res = await client.post("/api/rapports", json=body)

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["statut"] == "soumis"
    assert [(i["ordre"], i["url"].rsplit("/", 1)[-1]) for i in data["images"]] == [(1, "avant.jpg"), (2, "apres.jpg")]
    assert data["mission"]["num_intervention"] == mission["num_intervention"]
    assert data["technicien"]["nom"] == "Koné"


async def test_unknown_technicien_is_rejected(client, mission):
    res = await client.post("/api/rapports", json=rapport_payload(mission["id"], 999))

    assert res.status_code == 404


async def test_update_replaces_images(client, mission, technicien_row):
    body = rapport_payload(mission["id"], technicien_row.id, images=[{"url": "a.jpg"}, {"url": "b.jpg"}])
    rapport = (await client.post("/api/rapports", json=body)).json()["data"]

    res = await client.put(f"/api/rapports/{rapport['id']}", json={"images": [{"url": "c.jpg", "description": "après"}]})

    images = res.json()["data"]["images"]
    assert [(i["ordre"], i["url"]) for i in images] == [(1, "c.jpg")]


async def test_validation_sets_decision(client, mission, technicien_row):
    rapport = (await client.post("/api/rapports", json=rapport_payload(mission["id"], technicien_row.id))).json()["data"]

    res = await client.patch(
        f"/api/rapports/{rapport['id']}/validation",
        json={"statut": "valide", "commentaire": "Conforme"},
        headers={"X-Actor": "superviseur"},
    )

    data = res.json()["data"]
    assert data["statut"] == "valide"
    assert data["commentaire"] == "Conforme"
    assert data["date_validation"] is not None


async def test_validation_back_to_submitted_is_rejected(client, mission, technicien_row):
    rapport = (await client.post("/api/rapports", json=rapport_payload(mission["id"], technicien_row.id))).json()["data"]

    res = await client.patch(f"/api/rapports/{rapport['id']}/validation", json={"statut": "soumis"})

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_filter_by_technicien_and_delete_guard(client, mission, technicien_row):
    await client.post("/api/rapports", json=rapport_payload(mission["id"], technicien_row.id))

    mine = (await client.get("/api/rapports", params={"technicienId": technicien_row.id})).json()
    other = (await client.get("/api/rapports", params={"technicienId": 999})).json()
    assert mine["meta"]["total"] == 1
    assert other["meta"]["total"] == 0

    refused = await client.delete(f"/api/techniciens/{technicien_row.id}")
    assert refused.status_code == 400
    assert refused.json()["error"]["details"] == {"rapports": 1, "interventions": 0}


async def test_delete(client, mission, technicien_row):
    rapport = (await client.post("/api/rapports", json=rapport_payload(mission["id"], technicien_row.id))).json()["data"]

    assert (await client.delete(f"/api/rapports/{rapport['id']}")).status_code == 200
    assert (await client.get(f"/api/rapports/{rapport['id']}")).status_code == 404
