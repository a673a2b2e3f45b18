from __future__ import annotations

from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel

from fieldops.client.api import ApiClient, ApiResponse, query

"""
Services par ressource (client HTTP).

Rôle (fonctionnel) :
- Une classe par ressource (clients, techniciens, missions, devis, factures, rapports,
  interventions, tableau de bord), qui construit les URLs et les paramètres page / limit / filtres.
- Les corps de requête acceptent un dict ou un schéma Pydantic (sérialisé en JSON,
  champs non renseignés omis).
"""

Payload = Union[Mapping[str, Any], BaseModel]


def _body(data: Payload) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_unset=True)
    return dict(data)


class _Service:
    def __init__(self, api: ApiClient):
        self.api = api


class ClientService(_Service):
    async def list(
        self, page: Optional[int] = None, limit: Optional[int] = None, search: Optional[str] = None
    ) -> ApiResponse:
        return await self.api.get("/api/clients", params=query(page=page, limit=limit, search=search))

    async def get(self, client_id: int) -> ApiResponse:
        return await self.api.get(f"/api/clients/{client_id}")

    async def create(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/clients", _body(data))

    async def update(self, client_id: int, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/clients/{client_id}", _body(data))

    async def delete(self, client_id: int) -> ApiResponse:
        return await self.api.delete(f"/api/clients/{client_id}")


class TechnicienService(_Service):
    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        specialite_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> ApiResponse:
        params = query(page=page, limit=limit, specialiteId=specialite_id, search=search)
        return await self.api.get("/api/techniciens", params=params)

    async def get(self, technicien_id: int) -> ApiResponse:
        return await self.api.get(f"/api/techniciens/{technicien_id}")

    async def create(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/techniciens", _body(data))

    async def update(self, technicien_id: int, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/techniciens/{technicien_id}", _body(data))

    async def delete(self, technicien_id: int) -> ApiResponse:
        return await self.api.delete(f"/api/techniciens/{technicien_id}")


class MissionService(_Service):
    """Missions adressées par leur numéro (INT-…), encodé dans l’URL."""

    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        client_id: Optional[int] = None,
        statut: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ApiResponse:
        params = query(page=page, limit=limit, clientId=client_id, statut=statut, search=search)
        return await self.api.get("/api/missions", params=params)

    async def get(self, num_intervention: str) -> ApiResponse:
        return await self.api.get(f"/api/missions/{quote(num_intervention, safe='')}")

    async def create(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/missions", _body(data))

    async def update(self, num_intervention: str, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/missions/{quote(num_intervention, safe='')}", _body(data))

    async def delete(self, num_intervention: str) -> ApiResponse:
        return await self.api.delete(f"/api/missions/{quote(num_intervention, safe='')}")


class DevisService(_Service):
    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        statut: Optional[str] = None,
        client_id: Optional[int] = None,
        mission_id: Optional[int] = None,
    ) -> ApiResponse:
        params = query(page=page, limit=limit, statut=statut, clientId=client_id, missionId=mission_id)
        return await self.api.get("/api/devis", params=params)

    async def get(self, devis_id: int) -> ApiResponse:
        return await self.api.get(f"/api/devis/{devis_id}")

    async def create(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/devis", _body(data))

    async def update(self, devis_id: int, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/devis/{devis_id}", _body(data))

    async def validate(self, devis_id: int, data: Payload) -> ApiResponse:
        return await self.api.patch(f"/api/devis/{devis_id}/validation", _body(data))

    async def convert_to_facture(self, devis_id: int) -> ApiResponse:
        return await self.api.post(f"/api/devis/{devis_id}/facture")

    async def delete(self, devis_id: int) -> ApiResponse:
        return await self.api.delete(f"/api/devis/{devis_id}")


class FactureService(_Service):
    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        statut: Optional[str] = None,
        client_id: Optional[int] = None,
    ) -> ApiResponse:
        params = query(page=page, limit=limit, statut=statut, clientId=client_id)
        return await self.api.get("/api/factures", params=params)

    async def get(self, facture_id: int) -> ApiResponse:
        return await self.api.get(f"/api/factures/{facture_id}")

    async def overdue(self) -> ApiResponse:
        return await self.api.get("/api/factures/overdue")

    async def update(self, facture_id: int, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/factures/{facture_id}", _body(data))

    async def delete(self, facture_id: int) -> ApiResponse:
        return await self.api.delete(f"/api/factures/{facture_id}")


class RapportService(_Service):
    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        statut: Optional[str] = None,
        technicien_id: Optional[int] = None,
        mission_id: Optional[int] = None,
    ) -> ApiResponse:
        params = query(page=page, limit=limit, statut=statut, technicienId=technicien_id, missionId=mission_id)
        return await self.api.get("/api/rapports", params=params)

    async def get(self, rapport_id: int) -> ApiResponse:
        return await self.api.get(f"/api/rapports/{rapport_id}")

    async def create(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/rapports", _body(data))

    async def update(self, rapport_id: int, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/rapports/{rapport_id}", _body(data))

    async def validate(self, rapport_id: int, data: Payload) -> ApiResponse:
        return await self.api.patch(f"/api/rapports/{rapport_id}/validation", _body(data))

    async def delete(self, rapport_id: int) -> ApiResponse:
        return await self.api.delete(f"/api/rapports/{rapport_id}")


class InterventionService(_Service):
    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        mission_id: Optional[int] = None,
        technicien_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> ApiResponse:
        params = query(page=page, limit=limit, missionId=mission_id, technicienId=technicien_id, search=search)
        return await self.api.get("/api/interventions", params=params)

    async def get(self, intervention_id: int) -> ApiResponse:
        return await self.api.get(f"/api/interventions/{intervention_id}")

    async def create(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/interventions", _body(data))

    async def update(self, intervention_id: int, data: Payload) -> ApiResponse:
        return await self.api.put(f"/api/interventions/{intervention_id}", _body(data))

    async def check_availability(self, data: Payload) -> ApiResponse:
        return await self.api.post("/api/interventions/check-availability", _body(data))

    async def delete(self, intervention_id: int) -> ApiResponse:
        return await self.api.delete(f"/api/interventions/{intervention_id}")


class DashboardService(_Service):
    async def stats(self) -> ApiResponse:
        return await self.api.get("/api/dashboard/stats")
