from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import GeneratorDep, PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule, not_found
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.client import Client
from fieldops.models.devis import Devis
from fieldops.models.intervention import Intervention
from fieldops.models.mission import Mission
from fieldops.models.rapport import Rapport
from fieldops.schemas.common import Envelope
from fieldops.schemas.missions import MissionCreate, MissionOut, MissionStatut, MissionUpdate
from fieldops.services.documents import persist_with_reference
from fieldops.services.numbering import DocumentKind, NumberGenerator

"""
API Missions.

Rôle (fonctionnel) :
- Crée une mission : le numéro INT-… est attribué par le générateur puis garanti unique
  par la contrainte en base (retry borné, 409 si épuisé).
- Liste paginée avec filtres (statut, clientId, search), détail / mise à jour / suppression
  par numéro de mission.

Notes :
- Statut initial : en_cours si la date de sortie de fiche est passée ou présente, planifiee sinon.
- Suppression refusée si des rapports, des devis ou des interventions référencent la mission.
"""

router = APIRouter(prefix="/missions", tags=["missions"])
log = logging.getLogger("fieldops.missions")


def initial_statut(date_sortie: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    if date_sortie <= now:
        return MissionStatut.EN_COURS.value
    return MissionStatut.PLANIFIEE.value


async def _get_mission(db: AsyncSession, num_intervention: str) -> Mission:
    stmt = (
        select(Mission)
        .where(Mission.num_intervention == num_intervention)
        .execution_options(populate_existing=True)
    )
    mission = (await db.execute(stmt)).scalars().first()
    if not mission:
        raise not_found("Mission non trouvée")
    return mission


async def _ensure_client(db: AsyncSession, client_id: int) -> None:
    if not await db.get(Client, client_id):
        raise not_found("Client non trouvé")


@router.get("", response_model=Envelope[List[MissionOut]])
async def list_missions(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    statut: Optional[str] = None,
    client_id: Optional[int] = Query(None, alias="clientId"),
    search: Optional[str] = None,
):
    criteria = []
    if statut:
        criteria.append(Mission.statut == statut)
    if client_id:
        criteria.append(Mission.client_id == client_id)
    if search:
        pattern = f"%{search.strip()}%"
        criteria.append(
            or_(
                Mission.num_intervention.ilike(pattern),
                Mission.nature_intervention.ilike(pattern),
                Mission.objectif_du_contrat.ilike(pattern),
            )
        )

    total = await store.count(Mission, *criteria)
    stmt = (
        select(Mission)
        .where(*criteria)
        .order_by(Mission.date_sortie_fiche_intervention.desc(), Mission.id.desc())
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, MissionOut, total, pagination, "Missions récupérées avec succès")


@router.get("/{num_intervention}", response_model=Envelope[MissionOut])
async def get_mission(num_intervention: str, db: AsyncSession = Depends(get_db)):
    mission = await _get_mission(db, num_intervention)
    return ok(MissionOut.model_validate(mission), "Mission récupérée avec succès")


@router.post("", response_model=Envelope[MissionOut], status_code=201)
async def create_mission(
    payload: MissionCreate,
    db: AsyncSession = Depends(get_db),
    generator: NumberGenerator = GeneratorDep,
):
    await _ensure_client(db, payload.client_id)
    statut = initial_statut(payload.date_sortie_fiche_intervention)

    def build(reference: str) -> Mission:
        return Mission(
            num_intervention=reference,
            nature_intervention=payload.nature_intervention,
            objectif_du_contrat=payload.objectif_du_contrat,
            description=payload.description,
            priorite=payload.priorite,
            statut=statut,
            date_sortie_fiche_intervention=payload.date_sortie_fiche_intervention,
            client_id=payload.client_id,
        )

    mission = await persist_with_reference(db, generator, DocumentKind.MISSION, build)
    mission = await _get_mission(db, mission.num_intervention)
    return ok(MissionOut.model_validate(mission), "Mission créée avec succès")


@router.put("/{num_intervention}", response_model=Envelope[MissionOut])
async def update_mission(num_intervention: str, payload: MissionUpdate, db: AsyncSession = Depends(get_db)):
    mission = await _get_mission(db, num_intervention)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("client_id") is not None:
        await _ensure_client(db, changes["client_id"])

    old_status = mission.statut
    for field, value in changes.items():
        if value is not None:
            setattr(mission, field, value)
    await db.commit()

    if mission.statut != old_status:
        log.info(
            "mission status changed",
            extra={"reference": num_intervention, "old_status": old_status, "new_status": mission.statut},
        )

    mission = await _get_mission(db, num_intervention)
    return ok(MissionOut.model_validate(mission), "Mission mise à jour avec succès")


@router.delete("/{num_intervention}", response_model=Envelope[None])
async def delete_mission(
    num_intervention: str,
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
):
    mission = await _get_mission(db, num_intervention)

    linked = {
        "rapports": await store.count(Rapport, Rapport.mission_id == mission.id),
        "devis": await store.count(Devis, Devis.mission_id == mission.id),
        "interventions": await store.count(Intervention, Intervention.mission_id == mission.id),
    }
    if any(linked.values()):
        raise business_rule("Impossible de supprimer une mission ayant des éléments associés", details=linked)

    await db.delete(mission)
    await db.commit()
    log.info("mission deleted", extra={"reference": num_intervention})
    return ok(None, "Mission supprimée avec succès")
