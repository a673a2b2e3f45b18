from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule, not_found
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.client import Client
from fieldops.models.intervention import Intervention, InterventionTechnicien
from fieldops.models.mission import Mission
from fieldops.models.technicien import Technicien
from fieldops.schemas.common import Envelope
from fieldops.schemas.interventions import (
    AffectationIn,
    AvailabilityCheck,
    AvailabilityOut,
    ConflitOut,
    InterventionCreate,
    InterventionOut,
    InterventionUpdate,
    to_utc,
)
from fieldops.services.planning import find_conflicts

"""
API Interventions.

Rôle (fonctionnel) :
- Créneaux de travail sur une mission, avec les techniciens affectés (rôle + commentaire).
- Liste paginée (missionId, technicienId, search sur la nature de mission ou le nom du client),
  triée par date de début décroissante.
- Contrôle de disponibilité d’un technicien sur une période (conflits de créneaux).

Notes :
- Le contrôle de disponibilité est indicatif : la création n’est pas bloquée par un conflit,
  le front interroge /check-availability avant d’affecter.
"""

router = APIRouter(prefix="/interventions", tags=["interventions"])
log = logging.getLogger("fieldops.interventions")


async def _get_intervention(db: AsyncSession, intervention_id: int) -> Intervention:
    intervention = await db.get(Intervention, intervention_id, populate_existing=True)
    if not intervention:
        raise not_found("Intervention non trouvée")
    return intervention


async def _affectations(db: AsyncSession, techniciens: List[AffectationIn]) -> List[InterventionTechnicien]:
    for a in techniciens:
        if not await db.get(Technicien, a.technicien_id):
            raise not_found(f"Technicien avec l'ID {a.technicien_id} non trouvé")
    return [
        InterventionTechnicien(technicien_id=a.technicien_id, role=a.role, commentaire=a.commentaire)
        for a in techniciens
    ]


@router.get("", response_model=Envelope[List[InterventionOut]])
async def list_interventions(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    mission_id: Optional[int] = Query(None, alias="missionId"),
    technicien_id: Optional[int] = Query(None, alias="technicienId"),
    search: Optional[str] = None,
):
    criteria = []
    if mission_id:
        criteria.append(Intervention.mission_id == mission_id)
    if technicien_id:
        criteria.append(
            Intervention.id.in_(
                select(InterventionTechnicien.intervention_id).where(
                    InterventionTechnicien.technicien_id == technicien_id
                )
            )
        )
    if search:
        pattern = f"%{search.strip()}%"
        criteria.append(
            Intervention.mission_id.in_(
                select(Mission.id)
                .join(Client, Client.id == Mission.client_id)
                .where(or_(Mission.nature_intervention.ilike(pattern), Client.nom.ilike(pattern)))
            )
        )

    total = await store.count(Intervention, *criteria)
    stmt = (
        select(Intervention)
        .where(*criteria)
        .order_by(Intervention.date_heure_debut.desc(), Intervention.id.desc())
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, InterventionOut, total, pagination, "Interventions récupérées avec succès")


@router.post("/check-availability", response_model=Envelope[AvailabilityOut])
async def check_availability(payload: AvailabilityCheck, db: AsyncSession = Depends(get_db)):
    technicien = await db.get(Technicien, payload.technicien_id)
    if not technicien:
        raise not_found("Technicien non trouvé")
    if payload.date_heure_debut >= payload.date_heure_fin:
        raise business_rule("La date de début doit être antérieure à la date de fin")

    conflits = await find_conflicts(
        db,
        payload.technicien_id,
        payload.date_heure_debut,
        payload.date_heure_fin,
        exclude_id=payload.exclude_intervention_id,
    )

    result = AvailabilityOut(
        technicien_id=technicien.id,
        technicien=f"{technicien.prenom} {technicien.nom}",
        specialite=technicien.specialite.libelle if technicien.specialite else "Non définie",
        available=not conflits,
        debut=payload.date_heure_debut,
        fin=payload.date_heure_fin,
        conflits=[
            ConflitOut(
                id=i.id,
                mission=i.mission.nature_intervention,
                client=i.mission.client.nom,
                date_debut=i.date_heure_debut,
                date_fin=i.date_heure_fin,
            )
            for i in conflits
        ],
    )
    log.info(
        "availability checked",
        extra={"entity_id": technicien.id, "new_status": "disponible" if result.available else "occupe"},
    )
    return ok(result, "Vérification de disponibilité effectuée")


@router.get("/{intervention_id}", response_model=Envelope[InterventionOut])
async def get_intervention(intervention_id: int, db: AsyncSession = Depends(get_db)):
    intervention = await _get_intervention(db, intervention_id)
    return ok(InterventionOut.model_validate(intervention), "Intervention récupérée avec succès")


@router.post("", response_model=Envelope[InterventionOut], status_code=201)
async def create_intervention(payload: InterventionCreate, db: AsyncSession = Depends(get_db)):
    if not await db.get(Mission, payload.mission_id):
        raise not_found("Mission non trouvée")

    intervention = Intervention(
        mission_id=payload.mission_id,
        date_heure_debut=payload.date_heure_debut,
        date_heure_fin=payload.date_heure_fin,
        duree=payload.duree,
        techniciens=await _affectations(db, payload.techniciens),
    )
    db.add(intervention)
    await db.commit()

    intervention = await _get_intervention(db, intervention.id)
    return ok(InterventionOut.model_validate(intervention), "Intervention créée avec succès")


@router.put("/{intervention_id}", response_model=Envelope[InterventionOut])
async def update_intervention(
    intervention_id: int,
    payload: InterventionUpdate,
    db: AsyncSession = Depends(get_db),
):
    intervention = await _get_intervention(db, intervention_id)

    debut = payload.date_heure_debut or intervention.date_heure_debut
    fin = payload.date_heure_fin or intervention.date_heure_fin
    # Un seul côté du créneau modifié : l’ordre se vérifie avec la valeur en base
    if debut is not None and fin is not None and to_utc(fin) <= to_utc(debut):
        raise business_rule("La date de fin doit être postérieure à la date de début")

    if payload.date_heure_debut is not None:
        intervention.date_heure_debut = payload.date_heure_debut
    if payload.date_heure_fin is not None:
        intervention.date_heure_fin = payload.date_heure_fin
    if payload.duree is not None:
        intervention.duree = payload.duree
    if payload.techniciens is not None:
        affectations = await _affectations(db, payload.techniciens)
        # Suppression des anciennes affectations avant insertion (unicité intervention / technicien)
        intervention.techniciens = []
        await db.flush()
        intervention.techniciens = affectations

    await db.commit()

    intervention = await _get_intervention(db, intervention_id)
    return ok(InterventionOut.model_validate(intervention), "Intervention mise à jour avec succès")


@router.delete("/{intervention_id}", response_model=Envelope[None])
async def delete_intervention(intervention_id: int, db: AsyncSession = Depends(get_db)):
    intervention = await _get_intervention(db, intervention_id)
    await db.delete(intervention)
    await db.commit()
    return ok(None, "Intervention supprimée avec succès")
