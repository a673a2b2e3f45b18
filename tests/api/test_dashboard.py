"""Dashboard stats: global counters and per-status breakdowns."""

from datetime import date, datetime, timedelta, timezone

import pytest

from fieldops.services.dashboard import get_dashboard_stats
from tests.payloads import devis_payload, intervention_payload, rapport_payload


@pytest.fixture
async def activity(client, client_row, technicien_row, mission):
    """One devis waiting for DG, one invoiced devis, one submitted report, one intervention today."""
    waiting = (await client.post("/api/devis", json=devis_payload(client_row.id))).json()["data"]
    await client.patch(f"/api/devis/{waiting['id']}/validation", json={"statut": "en_attente"})

    invoiced = (await client.post("/api/devis", json=devis_payload(client_row.id))).json()["data"]
    await client.patch(f"/api/devis/{invoiced['id']}/validation", json={"statut": "accepte_client"})
    assert (await client.post(f"/api/devis/{invoiced['id']}/facture")).status_code == 201

    await client.post("/api/rapports", json=rapport_payload(mission["id"], technicien_row.id))

    now = datetime.now(timezone.utc)
    body = intervention_payload(
        mission["id"], technicien_row.id, debut=now.isoformat(), fin=(now + timedelta(hours=1)).isoformat()
    )
    assert (await client.post("/api/interventions", json=body)).status_code == 201


async def test_empty_database_lists_every_status(client):
    res = await client.get("/api/dashboard/stats")

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Statistiques récupérées avec succès"
    assert set(body["data"]["totals"].values()) == {0}
    assert body["data"]["missions_par_statut"] == {"planifiee": 0, "en_cours": 0, "terminee": 0, "annulee": 0}
    assert body["data"]["rapports_par_statut"] == {"soumis": 0, "valide": 0, "rejete": 0}


async def test_counts_reflect_activity(client, activity):
    data = (await client.get("/api/dashboard/stats")).json()["data"]

    assert data["totals"] == {
        "clients": 1,
        "clients_actifs": 1,
        "techniciens": 1,
        "missions": 1,
        "interventions": 1,
        "interventions_aujourdhui": 1,
        "devis_en_attente": 1,
        "factures_impayees": 0,
        "rapports_en_attente": 1,
    }
    assert data["missions_par_statut"]["en_cours"] == 1
    assert data["devis_par_statut"]["en_attente"] == 1
    assert data["devis_par_statut"]["facture"] == 1
    assert data["devis_par_statut"]["brouillon"] == 0
    assert data["factures_par_statut"]["emise"] == 1


async def test_facture_past_due_date_counts_as_unpaid(test_db, activity):
    later = date.today() + timedelta(days=60)

    stats = await get_dashboard_stats(test_db, today=later)

    assert stats.totals.factures_impayees == 1
    assert stats.totals.interventions_aujourdhui == 0
    assert stats.totals.interventions == 1
