"""Factures API: payment tracking, overdue listing, deletion rules."""

from datetime import date, timedelta

from sqlalchemy import update

from fieldops.models.facture import Facture
from tests.payloads import devis_payload


async def issue_facture(client, client_id):
    devis = (await client.post("/api/devis", json=devis_payload(client_id))).json()["data"]
    await client.patch(f"/api/devis/{devis['id']}/validation", json={"statut": "accepte_client"})
    res = await client.post(f"/api/devis/{devis['id']}/facture")
    assert res.status_code == 201
    return res.json()["data"]


async def test_list_and_get(client, client_row):
    facture = await issue_facture(client, client_row.id)

    listing = (await client.get("/api/factures", params={"clientId": client_row.id})).json()
    assert listing["meta"]["total"] == 1
    assert listing["data"][0]["numero"] == facture["numero"]

    got = await client.get(f"/api/factures/{facture['id']}")
    assert got.json()["data"]["client"]["nom"] == "Hôtel Ivoire"


async def test_overdue_lists_unpaid_past_due(client, client_row, test_db):
    facture = await issue_facture(client, client_row.id)
    await issue_facture(client, client_row.id)

    await test_db.execute(
        update(Facture).where(Facture.id == facture["id"]).values(date_echeance=date.today() - timedelta(days=5))
    )
    await test_db.commit()

    res = await client.get("/api/factures/overdue")

    data = res.json()["data"]
    assert [f["id"] for f in data] == [facture["id"]]
    assert data[0]["jours_retard"] == 5


async def test_paid_facture_leaves_overdue_and_is_dated(client, client_row, test_db):
    facture = await issue_facture(client, client_row.id)
    await test_db.execute(
        update(Facture).where(Facture.id == facture["id"]).values(date_echeance=date.today() - timedelta(days=1))
    )
    await test_db.commit()

    res = await client.put(
        f"/api/factures/{facture['id']}",
        json={"statut": "payee", "mode_paiement": "virement", "reference_transaction": "VIR-88412"},
    )

    data = res.json()["data"]
    assert data["statut"] == "payee"
    assert data["date_paiement"] is not None
    assert data["reference_transaction"] == "VIR-88412"
    assert (await client.get("/api/factures/overdue")).json()["data"] == []


async def test_paid_facture_cannot_be_deleted(client, client_row):
    facture = await issue_facture(client, client_row.id)
    await client.put(f"/api/factures/{facture['id']}", json={"statut": "payee"})

    res = await client.delete(f"/api/factures/{facture['id']}")

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BUSINESS_RULE"


async def test_unpaid_facture_can_be_deleted(client, client_row):
    facture = await issue_facture(client, client_row.id)

    assert (await client.delete(f"/api/factures/{facture['id']}")).status_code == 200
    assert (await client.get(f"/api/factures/{facture['id']}")).status_code == 404


async def test_unknown_status_is_rejected(client, client_row):
    facture = await issue_facture(client, client_row.id)

    res = await client.put(f"/api/factures/{facture['id']}", json={"statut": "remboursee"})

    assert res.status_code == 422
