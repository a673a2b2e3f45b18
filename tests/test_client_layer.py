"""HTTP client layer driven against the ASGI app (in-process transport)."""

import httpx
import pytest
from httpx import ASGITransport

from fieldops.client import (
    ApiClient,
    ApiError,
    ClientService,
    DashboardService,
    DevisService,
    InterventionService,
    MissionService,
    query,
)
from fieldops.client.api import parse_envelope
from fieldops.main import app
from fieldops.schemas.clients import ClientCreate
from tests.payloads import devis_payload, intervention_payload, mission_payload


@pytest.fixture
async def api(client):
    # `client` installs the test database override on the app
    async with ApiClient("http://test", actor="dg@fieldops", transport=ASGITransport(app=app)) as c:
        yield c


def test_query_drops_empty_values():
    assert query(page=2, limit=None, search="", statut="en_cours", clientId=0) == {
        "page": "2",
        "statut": "en_cours",
    }


def test_parse_envelope_raises_on_non_json():
    response = httpx.Response(502, text="Bad Gateway")

    with pytest.raises(ApiError) as exc:
        parse_envelope(response)

    assert exc.value.code == "INVALID_RESPONSE"
    assert exc.value.status == 502


async def test_create_and_list_clients(api):
    service = ClientService(api)

    created = await service.create(ClientCreate(nom="Société Générale CI", email="sg@example.ci"))
    assert created.success is True
    assert created.data["email"] == "sg@example.ci"

    listing = await service.list(page=1, limit=5)
    assert listing.meta.total == 1
    assert listing.meta.total_pages == 1
    assert listing.data[0]["nom"] == "Société Générale CI"


async def test_error_envelope_becomes_api_error(api):
    with pytest.raises(ApiError) as exc:
        await ClientService(api).get(404)

    assert exc.value.status == 404
    assert exc.value.code == "NOT_FOUND"
    assert exc.value.request_id


async def test_mission_lookup_by_reference(api, client_row):
    missions = MissionService(api)

    created = await missions.create(mission_payload(client_row.id))
    num = created.data["num_intervention"]

    fetched = await missions.get(num)
    assert fetched.data["id"] == created.data["id"]


async def test_devis_workflow_uses_actor_header(api, client_row):
    devis = DevisService(api)

    created = (await devis.create(devis_payload(client_row.id))).data
    validated = await devis.validate(created["id"], {"statut": "valide_dg"})
    assert validated.data["valide_par"] == "dg@fieldops"

    await devis.validate(created["id"], {"statut": "accepte_client"})
    facture = await devis.convert_to_facture(created["id"])
    assert facture.data["numero"].startswith("FAC-")

    with pytest.raises(ApiError) as exc:
        await devis.convert_to_facture(created["id"])
    assert exc.value.code == "BUSINESS_RULE"


async def test_intervention_availability_and_dashboard(api, client_row, technicien_row):
    mission = (await MissionService(api).create(mission_payload(client_row.id))).data
    interventions = InterventionService(api)

    await interventions.create(
        intervention_payload(
            mission["id"], technicien_row.id, debut="2026-05-04T08:00:00Z", fin="2026-05-04T12:00:00Z"
        )
    )
    check = await interventions.check_availability(
        {
            "technicien_id": technicien_row.id,
            "date_heure_debut": "2026-05-04T11:00:00Z",
            "date_heure_fin": "2026-05-04T13:00:00Z",
        }
    )
    assert check.data["available"] is False

    listing = await interventions.list(technicien_id=technicien_row.id)
    assert listing.meta.total == 1

    stats = await DashboardService(api).stats()
    assert stats.data["totals"]["interventions"] == 1
